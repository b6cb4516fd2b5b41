"""
AniMeta - Synthese de metadonnees anime et orchestration des rafraichissements.

Ce package reconcilie les metadonnees de Shoko, AniDB et TMDB en une
information canonique par entite, puis l'applique sur les elements d'une
bibliotheque hote, champ par champ, avec propagation aux enfants.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entites, ports, objets valeur)
- services/ : Couche application (synthese, fournisseurs, rafraichissement)
- infrastructure/ : Adaptateur de bibliotheque SQLModel
"""

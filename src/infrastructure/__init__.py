"""
Couche infrastructure d'AniMeta.

Implementations concretes des ports du domaine :

- persistence/ : Bibliotheque hote stockee en SQLite avec SQLModel
"""

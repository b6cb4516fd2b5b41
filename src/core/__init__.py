"""
Couche domaine (core).

Contient les entites metier, ports (interfaces abstraites), et objets valeur.
Cette couche n'a AUCUNE dependance vers l'infrastructure (adapters, frameworks, BDD).

Sous-packages :
- entities/ : Enregistrements source, informations canoniques, elements de bibliotheque
- ports/ : Interfaces abstraites definissant les contrats des collaborateurs
- value_objects/ : Objets valeur immutables (textes localises, notes, groupes de champs)
"""

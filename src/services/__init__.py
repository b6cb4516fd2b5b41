"""
Couche services (cas d'utilisation).

Les services assemblent les enregistrements source en informations
canoniques et les appliquent aux elements de la bibliotheque hote.
Ils ne dependent que des ports definis dans core/.
"""

"""
Couche domaine (core).

Contient les entités métier, ports (interfaces abstraites), objets valeur et
erreurs du domaine. Cette couche n'a AUCUNE dépendance vers l'infrastructure
(adapters, Pillow, BDD).

Sous-packages :
- entities/ : Entités métier (Album, Media, ArtifactSet)
- ports/ : Interfaces abstraites définissant les contrats pour les adaptateurs
- value_objects/ : Objets valeur immutables (SizePreset, vues de chemins)
"""

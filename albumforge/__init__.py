"""
AlbumForge - Generation de derives d'images et cycle de vie des albums.

Ce package produit, a partir des octets bruts d'une image uploadee, un jeu
canonique de fichiers derives (original + 3 tailles x 2 encodages), les rattache
a un album et garantit que le systeme de fichiers et les enregistrements en base
ne divergent jamais, y compris en cas d'echec partiel ou de suppression concurrente.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entites, ports, objets valeur, erreurs)
- services/ : Couche application (generation, cycle de vie, couvertures)
- adapters/ : Couche infrastructure (systeme de fichiers, Pillow, CLI)
- infrastructure/ : Persistance SQLModel
"""

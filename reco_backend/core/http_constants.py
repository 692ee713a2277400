"""Constantes HTTP pour éviter les valeurs magiques dans le code.

Ce module définit les codes de statut HTTP utilisés par l'API ainsi que les bornes de pagination
des recommandations.
"""

# Codes de statut HTTP courants
HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_INTERNAL_SERVER_ERROR = 500

# Limites de la sélection de références
DEFAULT_RECOMMENDATION_LIMIT = 6
MIN_RECOMMENDATION_LIMIT = 1
MAX_RECOMMENDATION_LIMIT = 12

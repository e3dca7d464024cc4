from .errors import error_response
from .auth import normalize_email

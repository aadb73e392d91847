# eduopps/routes/common.py
from eduopps.schemas import ErrorResponse

ERROR_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Missing, invalid or expired token"},
    403: {"model": ErrorResponse, "description": "Not allowed for this user"},
    404: {"model": ErrorResponse, "description": "Resource not found"},
    503: {"model": ErrorResponse, "description": "Transient database failure, retry"},
}

from fastapi import HTTPException, status

from .result import ErrorKind, Result

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.DUPLICATE_REQUEST: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorKind.VALIDATION_FAILURE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.BACKEND_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def raise_for_result(result: Result):
    """Return the value of a successful result, raise HTTPException otherwise."""
    if result.is_success:
        return result.value
    code = STATUS_BY_KIND.get(result.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if result.kind == ErrorKind.BACKEND_FAILURE:
        # внутренние детали наружу не отдаём
        raise HTTPException(status_code=code, detail="Internal server error")
    raise HTTPException(status_code=code, detail=result.message)

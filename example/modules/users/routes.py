from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/")
def list_users(request: Request):
    db = request.state.tenant.db
    if db is None:
        return []
    return db.get_users()

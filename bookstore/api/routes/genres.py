from fastapi import APIRouter
import uuid
from starlette.status import HTTP_201_CREATED

from bookstore.api.deps import DbSession
from bookstore.services.genre_service import GenreService
from bookstore.schemas.book import GenreWithBooks
from bookstore.schemas.common import ApiResponse
from bookstore.schemas.genre import GenreCreate, GenreRead, GenreUpdate

router = APIRouter(prefix="/genre", tags=["genre"])


@router.post("", response_model=ApiResponse[GenreRead], status_code=HTTP_201_CREATED)
def create_genre(data: GenreCreate, db: DbSession):
    genre = GenreService.create_genre(db, data)
    return ApiResponse(message="Genre created successfully", data=GenreRead.model_validate(genre))


@router.get("", response_model=ApiResponse[list[GenreWithBooks]])
def list_genres(db: DbSession):
    genres = GenreService.list_genres(db)
    return ApiResponse(
        message="Get all genres successfully",
        data=[GenreWithBooks.model_validate(g, from_attributes=True) for g in genres],
    )


@router.get("/{genre_id}", response_model=ApiResponse[GenreWithBooks])
def get_genre(genre_id: uuid.UUID, db: DbSession):
    genre = GenreService.get_genre(db, genre_id, with_books=True)
    return ApiResponse(
        message="Get genre detail successfully",
        data=GenreWithBooks.model_validate(genre, from_attributes=True),
    )


@router.patch("/{genre_id}", response_model=ApiResponse[GenreRead])
def update_genre(genre_id: uuid.UUID, data: GenreUpdate, db: DbSession):
    genre = GenreService.update_genre(db, genre_id, data)
    return ApiResponse(message="Genre updated successfully", data=GenreRead.model_validate(genre))


@router.delete("/{genre_id}", response_model=ApiResponse[None])
def delete_genre(genre_id: uuid.UUID, db: DbSession):
    GenreService.delete_genre(db, genre_id)
    return ApiResponse(message="Genre deleted successfully")

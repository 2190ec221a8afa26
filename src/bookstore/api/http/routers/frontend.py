"""Server-rendered views of the book collection."""

from pathlib import Path

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from src.bookstore.api.http.deps import get_book_repository
from src.bookstore.entities.service.book import BookRepository

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

router = APIRouter(tags=["frontend"])


def get_templates(request: Request) -> Jinja2Templates:
    return request.app.state.templates


@router.get("/", response_class=HTMLResponse)
def index(request: Request, templates: Jinja2Templates = Depends(get_templates)):
    return templates.TemplateResponse(request, "index.html")


@router.get("/books", response_class=HTMLResponse)
def book_table(
    request: Request,
    q: str | None = None,
    templates: Jinja2Templates = Depends(get_templates),
    repository: BookRepository = Depends(get_book_repository),
):
    books = repository.search(q) if q else repository.list_all()
    return templates.TemplateResponse(
        request, "book-table.html", {"books": books, "query": q}
    )


@router.get("/authors", response_class=HTMLResponse)
def authors_table(
    request: Request,
    templates: Jinja2Templates = Depends(get_templates),
    repository: BookRepository = Depends(get_book_repository),
):
    authors = [book.author for book in repository.list_all()]
    return templates.TemplateResponse(
        request, "authors-table.html", {"authors": authors}
    )


@router.get("/years", response_class=HTMLResponse)
def years_table(
    request: Request,
    templates: Jinja2Templates = Depends(get_templates),
    repository: BookRepository = Depends(get_book_repository),
):
    years = [book.year for book in repository.list_all()]
    return templates.TemplateResponse(request, "year-table.html", {"years": years})


@router.get("/search", response_class=HTMLResponse)
def search_bar(request: Request, templates: Jinja2Templates = Depends(get_templates)):
    return templates.TemplateResponse(request, "search-bar.html")


@router.get("/create", status_code=status.HTTP_204_NO_CONTENT)
def create_placeholder() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)

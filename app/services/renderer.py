from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.schemas.blog import PostDetail
from app.services.post_list import PostListState
from app.settings import Settings, settings
from app.utils import format_date, format_time

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


class PageRenderer:
    """Render the blog pages from view models with Jinja2."""

    def __init__(self, templates_dir: Path = TEMPLATES_DIR, current: Settings = settings):
        self.settings = current
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["format_date"] = format_date
        self.env.filters["format_time"] = format_time
        self.env.globals["site_title"] = current.SITE_TITLE

    def _render(self, template_name: str, **context) -> str:
        template = self.env.get_template(template_name)
        return template.render(**context)

    def home(
        self,
        state: PostListState,
        *,
        preview: bool = False,
        pages: int = 1,
    ) -> str:
        max_pages = self.settings.MAX_LOAD_MORE_PAGES
        # no link to ?pages=N+1 past the cap, it would show the same page again
        more_pages = pages + 1 if pages < max_pages else None
        return self._render(
            "home.html",
            posts=state.posts,
            next_page=state.next_page,
            has_more=state.has_more,
            error=state.error,
            pages=pages,
            more_pages=more_pages,
            max_pages=max_pages,
            preview=preview,
        )

    def post(self, post: PostDetail, *, preview: bool = False) -> str:
        return self._render(
            "post.html",
            post=post,
            preview=preview,
            utterances_repo=self.settings.UTTERANCES_REPO or None,
        )

    def fallback(self, refresh_seconds: Optional[int] = 1) -> str:
        return self._render("fallback.html", refresh_seconds=refresh_seconds)


renderer = PageRenderer()


def get_renderer() -> PageRenderer:
    return renderer

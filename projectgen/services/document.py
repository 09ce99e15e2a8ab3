from __future__ import annotations
from jinja2 import Environment, PackageLoader, select_autoescape

from projectgen.schemas import ProjectRequest

TEMPLATE_NAME = "project.html"

_env = Environment(
    loader=PackageLoader("projectgen", "templates"),
    autoescape=select_autoescape(["html"]),
)

def render_document(req: ProjectRequest, body_html: str) -> str:
    """Wrap the converted body in the A4 layout with a title page.

    Title-page fields are escaped; ``body_html`` is trusted output of the markdown step.
    """
    return _env.get_template(TEMPLATE_NAME).render(req=req, body_html=body_html)

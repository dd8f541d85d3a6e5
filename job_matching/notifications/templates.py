"""Jinja2 rendering of account emails.

Each email kind is a set of three templates in the email_templates package
directory, named after the kind:

    <kind>_subject.j2, <kind>_body.html.j2, <kind>_body.txt.j2

Missing variables are errors (StrictUndefined) and HTML output is escaped.
"""

from typing import Any, Dict

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError

from job_matching.logging import get_logger

from .models import NotificationTemplateError, RenderedEmail

logger = get_logger(__name__, component="notification")

TEMPLATE_PACKAGE = "job_matching.notifications"
TEMPLATE_DIR = "email_templates"


def template_names(kind: str) -> Dict[str, str]:
    """File names of the subject, HTML and text templates for one email kind."""
    return {
        "subject": f"{kind}_subject.j2",
        "html_body": f"{kind}_body.html.j2",
        "text_body": f"{kind}_body.txt.j2",
    }


class TemplateRenderer:
    """Renders an email kind into subject, HTML body and text body."""

    def __init__(self, template_dir: str = TEMPLATE_DIR):
        self.env = Environment(
            loader=PackageLoader(TEMPLATE_PACKAGE, template_dir),
            autoescape=True,
            undefined=StrictUndefined,
        )

    def render(self, kind: str, context: Dict[str, Any]) -> RenderedEmail:
        """Render every template of one email kind.

        The subject is collapsed onto a single line.

        Raises:
            NotificationTemplateError: If a template is missing or references
                a variable the context does not provide
        """
        names = template_names(kind)

        try:
            parts = {
                part: self.env.get_template(name).render(context)
                for part, name in names.items()
            }
        except TemplateError as e:
            error_msg = f"Template rendering failed for {kind} email: {e}"
            logger.error(
                error_msg,
                exc_info=True,
                extra={
                    "event": "notification.template.failed",
                    "kind": kind,
                    "error_type": type(e).__name__,
                },
            )
            raise NotificationTemplateError(error_msg) from e

        logger.debug(
            f"Rendered {kind} email",
            extra={"event": "notification.template.rendered", "kind": kind},
        )
        return RenderedEmail(
            subject=" ".join(parts["subject"].split()),
            html_body=parts["html_body"],
            text_body=parts["text_body"],
        )

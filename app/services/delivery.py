"""Simulated delivery actions: document exports and results email.

Nothing is produced or sent. Each action waits for its simulated latency and
acknowledges success.
"""

import logging
import pathlib

import jinja2

from app.core.latency import Latency
from app.models.analysis_models import AnalysisResult
from app.models.delivery_models import DeliveryAck
from app.services.analysis_repository import AnalysisRepository

logger = logging.getLogger(__name__)

TEMPLATE_DIR = pathlib.Path(__file__).parent / "templates"

# Placeholder link, no document is ever generated
PLACEHOLDER_DOWNLOAD_URL = "#"


class DeliveryService:
    def __init__(
        self,
        analyses: AnalysisRepository,
        latency: Latency,
        email_template_name: str = "results_email.jinja2",
    ):
        self.analyses = analyses
        self.latency = latency
        self.email_template_name = email_template_name
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(TEMPLATE_DIR),
            autoescape=False,
            trim_blocks=True,
        )

    async def export_to_pdf(self, file_id: str) -> DeliveryAck:
        logger.info("[%s] PDF export requested", file_id)
        await self.latency.wait("export_pdf")
        return DeliveryAck(message="Export PDF réussi", download_url=PLACEHOLDER_DOWNLOAD_URL)

    async def export_to_pptx(self, file_id: str) -> DeliveryAck:
        logger.info("[%s] PowerPoint export requested", file_id)
        await self.latency.wait("export_pptx")
        return DeliveryAck(message="Export PowerPoint réussi", download_url=PLACEHOLDER_DOWNLOAD_URL)

    def render_results_email(self, file_id: str, result: AnalysisResult | None) -> str:
        """Compose the body of the results email for *file_id*."""
        template = self.env.get_template(self.email_template_name)
        available = [a.value for a in result.available_artifacts()] if result else []
        return template.render(file_id=file_id, result=result, available=available)

    async def send_results(self, file_id: str, email: str) -> DeliveryAck:
        """Pretend to email the analysis results of *file_id* to *email*.

        The address is expected to be validated by the caller.
        """
        logger.info("[%s] Results email requested for %s", file_id, email)
        body = self.render_results_email(file_id, self.analyses.get(file_id))
        await self.latency.wait("email")
        logger.debug("[%s] Simulated email to %s:\n%s", file_id, email, body)
        return DeliveryAck(message=f"Résultats envoyés avec succès à {email}")

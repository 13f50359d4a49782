"""
Report Service

Fetches the photos referenced by an inspection and renders its PDF report.
Rendering is CPU bound, so it runs in a worker thread.
"""
import asyncio
import logging
from typing import Dict, Iterable, Optional, Tuple

import httpx

from pdc_pro.core.config import settings
from pdc_pro.models.inspection import Inspection
from pdc_pro.services.image_upload_service import get_trusted_image_origins
from pdc_pro.services.report_builder import build_report, report_filename
from pdc_pro.services.report_renderer import render_report_pdf

logger = logging.getLogger(__name__)


def is_trusted_image_url(url: str, origins: Dict[str, str]) -> bool:
    """https URL on a trusted image host, under that host's path prefix."""
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        return False

    prefix = origins.get(parsed.host.lower())
    return (
        prefix is not None
        and parsed.scheme == "https"
        and parsed.port in (None, 443)
        and not parsed.userinfo
        and parsed.path.startswith(prefix)
    )


async def fetch_report_images(
    urls: Iterable[str],
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    origins: Optional[Dict[str, str]] = None
) -> Dict[str, bytes]:
    """
    Download photo bytes keyed by URL.

    Only URLs on the configured image host are requested; anything else a
    user stored in the record is skipped. Failed downloads are logged and
    left out of the result.
    """
    origins = origins if origins is not None else get_trusted_image_origins()

    unique = []
    for url in dict.fromkeys(url for url in urls if url):
        if is_trusted_image_url(url, origins):
            unique.append(url)
        else:
            logger.warning(f"Report photo skipped, not on a trusted image host: {url}")
    if not unique:
        return {}

    timeout = timeout if timeout is not None else settings.REPORT_IMAGE_TIMEOUT
    images: Dict[str, bytes] = {}

    async with httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=False) as client:
        async def fetch(url: str):
            try:
                response = await client.get(url)
                response.raise_for_status()
                images[url] = response.content
            except httpx.HTTPError as e:
                logger.warning(f"Report photo download failed for {url}: {e}")

        await asyncio.gather(*(fetch(url) for url in unique))

    return images


async def generate_inspection_report(
    inspection: Inspection,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> Tuple[str, bytes]:
    """
    Render the report of an inspection.

    Returns:
        (download filename, PDF bytes)
    """
    report = build_report(inspection)
    images = await fetch_report_images(report.photo_urls, transport=transport)
    pdf = await asyncio.to_thread(render_report_pdf, report, images)

    logger.info(f"Rendered report for inspection {inspection.id} ({len(pdf)} bytes, {len(images)} photos)")
    return report_filename(inspection, report.generated_on), pdf

"""Direct TLS handshake check."""

import asyncio
import logging
import ssl
from typing import Optional

from leadscout.config import settings

logger = logging.getLogger(__name__)


async def check_ssl(host: str, port: int = 443, timeout: Optional[float] = None) -> bool:
    """Return True if a verified TLS handshake with host completes and yields a certificate.

    Handshake errors and timeouts count as no SSL; they never raise.
    """
    if not host:
        return False

    context = ssl.create_default_context()
    writer = None
    try:
        _, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port, ssl=context, server_hostname=host),
            timeout=timeout or settings.tls_timeout,
        )
        cert = writer.get_extra_info("peercert")
        return bool(cert)

    except asyncio.TimeoutError:
        logger.debug(f"TLS handshake timed out for {host}")
        return False

    except (ssl.SSLError, OSError) as e:
        logger.debug(f"TLS handshake failed for {host}: {e}")
        return False

    finally:
        if writer is not None:
            writer.close()

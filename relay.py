"""Stream media bytes from a direct URL back to the caller as an attachment."""

import logging

import requests
from flask import Response
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

import config
from errors import InvalidInput, UpstreamFetchFailed
from resolver import sanitize_title

logger = logging.getLogger(__name__)

MP4_MIMETYPE = "video/mp4"


def _session():
    session = requests.Session()
    # Only the connection is retried; once bytes flow a retry would restart the body.
    retries = Retry(total=2, connect=2, read=0, backoff_factor=0.5, status_forcelist=[502, 503, 504])
    session.mount('https://', HTTPAdapter(max_retries=retries))
    session.mount('http://', HTTPAdapter(max_retries=retries))
    session.headers.update({"User-Agent": config.UPSTREAM_USER_AGENT})
    return session


def open_upstream(direct_url: str, session: requests.Session) -> requests.Response:
    """Open a streaming GET with a bounded connect time and no read timeout."""
    try:
        upstream = session.get(
            direct_url,
            stream=True,
            timeout=(config.UPSTREAM_CONNECT_TIMEOUT, None),
        )
    except requests.RequestException as e:
        raise UpstreamFetchFailed(details=str(e)) from e

    if upstream.status_code >= 400:
        upstream.close()
        raise UpstreamFetchFailed(details=f"Upstream responded with HTTP {upstream.status_code}")
    return upstream


def iter_relay(upstream, session, label, chunk_size=None):
    """Yield the upstream body chunk by chunk, closing the connection when done.

    Headers are already committed once the first chunk is out, so a failure
    mid-stream can only be logged and the output cut short.
    """
    sent = 0
    try:
        for chunk in upstream.iter_content(chunk_size=chunk_size or config.RELAY_CHUNK_SIZE):
            if chunk:
                sent += len(chunk)
                yield chunk
    except GeneratorExit:
        logger.info("Client disconnected from %s after %d bytes", label, sent)
        raise
    except (requests.RequestException, OSError) as e:
        logger.error("Stream error for %s after %d bytes: %s", label, sent, e)
        raise UpstreamFetchFailed(details=str(e)) from e
    else:
        logger.info("Finished streaming: %s (%d bytes)", label, sent)
    finally:
        upstream.close()
        session.close()


def relay(direct_url, filename=None) -> Response:
    """Build a streaming attachment response for direct_url.

    The upstream connection is opened and the first chunk read before the
    response exists, so a failure up to that point surfaces as
    UpstreamFetchFailed with no attachment headers sent.
    """
    if not direct_url:
        raise InvalidInput("Missing video URL")

    name = sanitize_title(filename)
    logger.info("Proxying download for: %s", name)
    logger.info("Source URL (first 200 chars): %s...", direct_url[:200])

    session = _session()
    try:
        upstream = open_upstream(direct_url, session)
    except UpstreamFetchFailed:
        session.close()
        raise

    body = iter_relay(upstream, session, name)
    # iter_relay closes upstream and session itself when it fails here.
    first = next(body, b"")

    response = Response(
        _resume(first, body),
        mimetype=MP4_MIMETYPE,
        headers={"Content-Disposition": f'attachment; filename="{name}.mp4"'},
    )
    # HEAD requests never iterate the body; closing it still releases upstream.
    response.call_on_close(body.close)
    return response


def _resume(first, rest):
    if first:
        yield first
    yield from rest

"""
HTTP Utility module for standardized API requests.
Handles timeouts, status mapping and common error logging.
"""

import requests
from typing import Optional, Dict, Any, Union
from utils.errors import NotFoundError, UpstreamError
from utils.logger import setup_logger

logger = setup_logger('http_utils')


def make_request(
    url: str,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = 10,
    source_name: str = "API",
    symbol: Optional[str] = None,
    session: Optional[requests.Session] = None
) -> Union[Dict, list]:
    """
    Make a single HTTP GET request and decode the JSON body.

    Args:
        url: The full URL to request.
        params: Query parameters dictionary.
        headers: Request headers dictionary.
        timeout: Request timeout in seconds.
        source_name: Name of the data source for logging.
        symbol: Symbol the request is about, carried into errors.
        session: Optional requests.Session (connection reuse, test doubles).

    Returns:
        Parsed JSON response.

    Raises:
        NotFoundError: HTTP 404.
        UpstreamError: Any other HTTP error, connection failure, timeout or bad JSON.
    """
    http = session or requests
    try:
        response = http.get(url, params=params, headers=headers, timeout=timeout)
        response.raise_for_status()
        return response.json()

    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        if status == 404:
            logger.warning(f"{source_name} 404 Not Found: {url}")
            raise NotFoundError(symbol or url) from e
        if status == 429:
            logger.warning(f"{source_name} rate limited (429)")
        elif status in (401, 403):
            logger.warning(f"{source_name} {status}: key invalid or feature not on current plan")
        else:
            logger.error(f"{source_name} HTTP error: {e}")
        raise UpstreamError(source_name, f"HTTP {status}", symbol) from e

    except requests.exceptions.Timeout as e:
        logger.warning(f"{source_name} timed out after {timeout}s: {url}")
        raise UpstreamError(source_name, f"timed out after {timeout}s", symbol) from e

    except requests.exceptions.RequestException as e:
        logger.warning(f"{source_name} connection error: {e}")
        raise UpstreamError(source_name, f"connection error: {e}", symbol) from e

    except ValueError as e:
        logger.error(f"{source_name} JSON parsing error: {e}")
        raise UpstreamError(source_name, "invalid JSON body", symbol) from e

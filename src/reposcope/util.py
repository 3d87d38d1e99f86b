# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module includes utilities functions for reposcope."""

import logging
import time

import requests
from requests.models import Response

from reposcope.config.defaults import defaults
from reposcope.provenance.cancellation import Cancellation

logger: logging.Logger = logging.getLogger(__name__)

#: The status codes after which a request is attempted again.
RETRY_STATUS_CODES = {429, 500, 502, 503, 504}


def send_get_http_raw(
    url: str,
    headers: dict | None = None,
    timeout: int | None = None,
    session: requests.Session | None = None,
    cancellation: Cancellation | None = None,
) -> Response | None:
    """Send the GET HTTP request with the given url and headers.

    Connection errors and transient server errors (see ``RETRY_STATUS_CODES``) are retried up to
    ``[requests] error_retries`` times, waiting a little longer after each attempt.

    Parameters
    ----------
    url : str
        The url of the request.
    headers : dict | None
        The dict that describes the headers of the request.
    timeout: int | None
        The request timeout (optional).
    session: requests.Session | None
        The session used to send the request. If None, a new connection is opened.
    cancellation: Cancellation | None
        The signal checked before each attempt. The request timeout and the delay between attempts
        never exceed its deadline.

    Returns
    -------
    Response | None
        The last response received, whatever its status code, or None if no response could be received.

    Raises
    ------
    AnalysisCancelledError
        If ``cancellation`` is raised or its deadline passes before the request succeeds.
    """
    logger.debug("GET - %s", url)
    if not timeout:
        timeout = defaults.getint("requests", "timeout", fallback=10)
    error_retries = defaults.getint("requests", "error_retries", fallback=5)
    retry_delay = defaults.getfloat("requests", "retry_delay", fallback=1.0)
    get = session.get if session else requests.get

    response: Response | None = None
    for attempt in range(error_retries + 1):
        request_timeout: float = timeout
        if cancellation is not None:
            if attempt:
                cancellation.sleep(retry_delay * attempt)
            remaining = cancellation.remaining()
            # A deadline reached before the check makes it raise, so the timeout below is positive.
            cancellation.raise_if_cancelled()
            if remaining is not None:
                request_timeout = min(request_timeout, remaining)
        elif attempt:
            time.sleep(retry_delay * attempt)

        try:
            response = get(url=url, headers=headers, timeout=request_timeout)
        except requests.exceptions.RequestException as error:
            logger.debug("Request to %s failed: %s", url, error)
            response = None
            continue

        if response.status_code not in RETRY_STATUS_CODES:
            return response
        logger.debug("Receiving error code %s from server.", response.status_code)

    logger.debug("Maximum retries reached: %s", error_retries)
    return response

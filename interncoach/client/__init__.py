"""
Client side of InternCoach.

Talks to the store service over HTTP and derives every statistic from the full
collection it gets back. Presentation (HTML, charts) is not part of this
package; scripts/tracker.py is the command-line front end.
"""

from interncoach.client.api_client import ClientError, InternshipClient, NotFoundError
from interncoach.client.controller import DashboardController, DashboardSnapshot
from interncoach.client.preferences import ClientPreferences

__all__ = [
    "ClientError",
    "ClientPreferences",
    "DashboardController",
    "DashboardSnapshot",
    "InternshipClient",
    "NotFoundError",
]

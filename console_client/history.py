"""
Revision history reader.

Reads are side-effect free and always return revisions oldest first. A failed
fetch is not fatal: the reader logs it, reports a HistoryUnavailableError to
the notifier and returns an empty result. Authorization failures still
propagate so the caller can react to them.
"""
import datetime
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

import requests
from dateutil import parser as date_parser

from core.access_control.exceptions import (
    ApiError,
    ForbiddenError,
    HistoryUnavailableError,
)
from core.revisions.formatters import format_revision_row

logger = logging.getLogger(__name__)

# Entity type -> API resource segment
ENTITY_RESOURCES = {
    'Department': 'departments',
    'JobTitle': 'job-titles',
    'User': 'users',
    'Role': 'roles',
}


@dataclass(frozen=True)
class Revision:
    id: int
    entity_type: str
    entity_id: str
    operation: str
    field_name: Optional[str]
    previous_value: Any
    current_value: Any
    modified_by: Optional[dict]
    modification_date: datetime.datetime

    @classmethod
    def from_payload(cls, data) -> 'Revision':
        return cls(
            id=int(data['id']),
            entity_type=data['entity_type'],
            entity_id=str(data['entity_id']),
            operation=data['operation'],
            field_name=data.get('field_name'),
            previous_value=data.get('previous_value'),
            current_value=data.get('current_value'),
            modified_by=data.get('modified_by'),
            modification_date=date_parser.isoparse(data['modification_date']),
        )

    @property
    def sort_key(self):
        moment = self.modification_date
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=datetime.timezone.utc)
        return (moment, self.id)

    def display(self, locale='en') -> dict:
        return format_revision_row(self, locale)


@dataclass(frozen=True)
class HistoryPage:
    count: int = 0
    results: List[Revision] = field(default_factory=list)
    next: Optional[str] = None
    previous: Optional[str] = None


def resource_for(entity_type) -> str:
    try:
        return ENTITY_RESOURCES[entity_type]
    except KeyError:
        raise ValueError(f"Unknown entity type '{entity_type}'")


class RevisionReader:
    """
    Fetches revision history through a ConsoleClient.

    Args:
        client: ConsoleClient (the gate checks ``<module>:view-history``)
        notifier: called with a HistoryUnavailableError when a fetch fails
    """

    def __init__(self, client, notifier: Optional[Callable[[HistoryUnavailableError], None]] = None):
        self.client = client
        self.notifier = notifier

    def _unavailable(self, entity_type, entity_id, cause):
        error = HistoryUnavailableError(entity_type, entity_id, cause)
        logger.warning("%s", error)
        if self.notifier is not None:
            self.notifier(error)

    def get_entity_history(self, entity_type, entity_id) -> List[Revision]:
        """
        Every revision of one entity, oldest first; [] when there is none.

        Raises:
            PermissionDeniedError, SessionExpiredError, ForbiddenError
        """
        path = f"/{resource_for(entity_type)}/history/entity/{entity_id}/"
        try:
            data = self.client.request('GET', path)
            revisions = [Revision.from_payload(item) for item in data or []]
        except ForbiddenError:
            raise
        except (ApiError, requests.RequestException, KeyError, TypeError, ValueError) as e:
            self._unavailable(entity_type, entity_id, e)
            return []
        return sorted(revisions, key=lambda revision: revision.sort_key)

    def get_model_history(self, entity_type, **filters) -> HistoryPage:
        """
        One page of history for every entity of a type.

        Filters: operation, field_name, modified_by, entity_id, date_from,
        date_to, page, page_size.
        """
        path = f"/{resource_for(entity_type)}/history/"
        params = {key: value for key, value in filters.items() if value is not None}
        try:
            data = self.client.request('GET', path, params=params or None)
            results = [Revision.from_payload(item) for item in data['results']]
            return HistoryPage(
                count=int(data['count']),
                results=results,
                next=data.get('next'),
                previous=data.get('previous'),
            )
        except ForbiddenError:
            raise
        except (ApiError, requests.RequestException, KeyError, TypeError, ValueError) as e:
            self._unavailable(entity_type, None, e)
            return HistoryPage()

    def get_entity_history_rows(self, entity_type, entity_id, locale=None) -> List[dict]:
        """Display rows for the history dialog."""
        locale = locale or self.client.config.locale
        return [revision.display(locale) for revision in self.get_entity_history(entity_type, entity_id)]

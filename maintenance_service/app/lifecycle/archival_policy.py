from ..enum.maintenance_enum import ArchiveViewer, RequestStatus
from .errors import ArchiveNotAllowed

ARCHIVABLE_STATUSES = (RequestStatus.COMPLETED, RequestStatus.CANCELLED)

_FLAG_BY_VIEWER = {
    ArchiveViewer.TENANT: "tenant_archived",
    ArchiveViewer.STAFF: "staff_archived",
}


class ArchivalPolicy:
    """Per-viewer archive flags on a request.

    The flags only hide a request from one viewer's active list; they never
    change its lifecycle state.
    """

    def clear(self, request) -> None:
        """Put the request back into both active views."""
        request.tenant_archived = False
        request.staff_archived = False

    def archive(self, request, viewer) -> bool:
        """Hide a finished request for ``viewer``.

        Returns False when it was already archived for that viewer.
        """
        if request.status not in ARCHIVABLE_STATUSES:
            raise ArchiveNotAllowed(request.id, request.status)
        return self._set(request, viewer, True)

    def unarchive(self, request, viewer) -> bool:
        return self._set(request, viewer, False)

    def is_archived_for(self, request, viewer) -> bool:
        return bool(getattr(request, _FLAG_BY_VIEWER[ArchiveViewer(viewer)]))

    def _set(self, request, viewer, value: bool) -> bool:
        flag = _FLAG_BY_VIEWER[ArchiveViewer(viewer)]
        if bool(getattr(request, flag)) == value:
            return False
        setattr(request, flag, value)
        return True

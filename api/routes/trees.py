"""Directory tree endpoints.

Transcripts are uploaded once and parsed into stored trees; every other
endpoint is a read-only query against a stored tree.
"""

from fastapi import APIRouter, Query, status

from api.dependencies import SpaceSettingsDep, TreeStoreDep
from api.models import (
    DirectoryInfo,
    DirectoryListResponse,
    SmallDirectoriesResponse,
    SmallestDirectoryResponse,
    TreeDeletedResponse,
    TreeDetailResponse,
    TreeListResponse,
    TreeSizeResponse,
    TreeSummaryResponse,
    UploadTranscriptRequest,
)
from models.space_report import DiskUsageReport, build_report

router = APIRouter(
    prefix="/trees",
    tags=["trees"],
)


@router.post(
    "",
    response_model=TreeSummaryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_transcript(request: UploadTranscriptRequest, store: TreeStoreDep):
    """Parse a transcript and store the resulting tree.

    A transcript with a malformed size is rejected whole (422) and nothing
    is stored. A tree whose summary cannot be produced is removed again
    before the error propagates.
    """
    stored = store.add_transcript(request.transcript, skip_header=request.skip_header)
    try:
        return TreeSummaryResponse.from_stored(stored)
    except Exception:
        store.remove(stored.tree_id)
        raise


@router.get("", response_model=TreeListResponse)
async def list_trees(store: TreeStoreDep):
    """List every stored tree, oldest first."""
    trees = [TreeSummaryResponse.from_stored(stored) for stored in store.list_trees()]
    return TreeListResponse(trees=trees, count=len(trees))


@router.get("/{tree_id}", response_model=TreeDetailResponse)
async def get_tree(tree_id: str, store: TreeStoreDep):
    """Return a stored tree's summary and its nested snapshot."""
    stored = store.get(tree_id)
    summary = TreeSummaryResponse.from_stored(stored)
    return TreeDetailResponse(**summary.model_dump(), root=stored.root.to_snapshot())


@router.delete("/{tree_id}", response_model=TreeDeletedResponse)
async def delete_tree(tree_id: str, store: TreeStoreDep):
    """Remove a stored tree."""
    store.remove(tree_id)
    return TreeDeletedResponse(tree_id=tree_id)


@router.get("/{tree_id}/size", response_model=TreeSizeResponse)
async def get_tree_size(tree_id: str, store: TreeStoreDep):
    """Return the total size of the root directory."""
    stored = store.get(tree_id)
    return TreeSizeResponse(tree_id=tree_id, total_size=stored.root.size())


@router.get("/{tree_id}/directories", response_model=DirectoryListResponse)
async def list_directories(tree_id: str, store: TreeStoreDep):
    """List every directory, root included, in pre-order with sizes."""
    stored = store.get(tree_id)
    directories = [
        DirectoryInfo(name=directory.name, size=size)
        for directory, size in stored.root.directory_sizes()
    ]
    return DirectoryListResponse(
        tree_id=tree_id, directories=directories, count=len(directories)
    )


@router.get("/{tree_id}/small-directories", response_model=SmallDirectoriesResponse)
async def list_small_directories(
    tree_id: str,
    store: TreeStoreDep,
    settings: SpaceSettingsDep,
    limit: int | None = Query(
        default=None, ge=0, description="Exclusive size limit (defaults to settings)"
    ),
):
    """List directories strictly smaller than ``limit`` and sum their sizes.

    Each directory is judged independently, so nested small directories are
    counted even when their parent is too large.
    """
    stored = store.get(tree_id)
    if limit is None:
        limit = settings.small_directory_limit

    directories = [
        DirectoryInfo(name=directory.name, size=size)
        for directory, size in stored.root.small_directories(limit)
    ]
    return SmallDirectoriesResponse(
        tree_id=tree_id,
        directories=directories,
        count=len(directories),
        limit=limit,
        total_size=sum(directory.size for directory in directories),
    )


@router.get("/{tree_id}/smallest-directory", response_model=SmallestDirectoryResponse)
async def get_smallest_directory(
    tree_id: str,
    store: TreeStoreDep,
    required: int = Query(description="Minimum directory size in bytes"),
):
    """Return the smallest directory whose size is at least ``required``.

    Responds 404 when no directory is large enough.
    """
    stored = store.get(tree_id)
    directory, size = stored.root.smallest_directory_at_least(required)
    return SmallestDirectoryResponse(
        tree_id=tree_id,
        required=required,
        directory=DirectoryInfo(name=directory.name, size=size),
    )


@router.get("/{tree_id}/report", response_model=DiskUsageReport)
async def get_report(
    tree_id: str,
    store: TreeStoreDep,
    settings: SpaceSettingsDep,
    device_capacity: int | None = Query(default=None, ge=0),
    required_free: int | None = Query(default=None, ge=0),
    small_directory_limit: int | None = Query(default=None, ge=0),
):
    """Build the disk usage report, overriding configured settings per request."""
    stored = store.get(tree_id)
    overrides = {
        "device_capacity": device_capacity,
        "required_free": required_free,
        "small_directory_limit": small_directory_limit,
    }
    settings = settings.model_copy(
        update={key: value for key, value in overrides.items() if value is not None}
    )
    return build_report(stored.root, settings)

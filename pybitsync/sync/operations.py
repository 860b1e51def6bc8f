"""Single file operations against the repository."""

import logging

from ..api import BitbucketClient
from ..models import DownloadedFile, RemoteFile, RepositoryRef

logger = logging.getLogger(__name__)

RAW_FILE_PATH = "repositories/{username}/{repo_slug}/raw/{revision}/{filename}"


class SyncOperations:
    """File level operations used by the sync pipeline."""

    def __init__(self, client: BitbucketClient):
        """Initialize sync operations.

        Args:
            client: Bitbucket API client
        """
        self.client = client

    def download_file(
        self,
        repository: RepositoryRef,
        remote_file: RemoteFile,
        revision: str,
    ) -> DownloadedFile:
        """Download the contents of a remote file.

        Args:
            repository: Repository holding the file
            remote_file: File to download
            revision: Commit the file is read at

        Returns:
            DownloadedFile with the raw contents

        Raises:
            BitbucketAPIError: If the download fails. The failing path is
                logged before the error propagates.
        """
        params = {
            **repository.params,
            "filename": remote_file.path,
            "revision": revision,
        }
        try:
            contents = self.client.get(RAW_FILE_PATH, params, raw=True)
        except Exception as e:
            logger.error("Error downloading '%s'", remote_file.path)
            logger.error("%s", e)
            raise

        if isinstance(contents, str):
            contents = contents.encode("utf-8")
        return DownloadedFile(path=remote_file.path, contents=contents)

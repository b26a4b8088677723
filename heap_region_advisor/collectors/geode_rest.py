"""Apache Geode / GemFire developer REST API client."""
import logging
from typing import Any
from typing import Dict
from typing import Iterator
from typing import List
from typing import Optional
from urllib.parse import quote
from urllib.parse import urlparse

import requests

from heap_region_advisor.exceptions import DataSourceError
from heap_region_advisor.models.partition import Partition
from heap_region_advisor.models.partition import build_partition_tree

from .datasource import IDataSource

logger = logging.getLogger(__name__)

REST_PREFIX = "/geode/v1"


class GeodeRestClient(IDataSource):
    """Reads cache regions of one member through the developer REST API."""

    def __init__(
        self,
        base_url: str,
        member_name: Optional[str] = None,
        timeout: int = 10,
        verify: bool = True,
    ):
        """base_url like http://<host>:7070."""
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.verify = verify
        self._member_name = member_name or urlparse(self.base_url).netloc or self.base_url

    def _url(self, path: str) -> str:
        return f"{self.base_url}{REST_PREFIX}{path}"

    def _request(
        self, method: str, path: str, params: Optional[Dict[str, Any]] = None
    ) -> requests.Response:
        """Send a request to the REST endpoint and raise on HTTP errors."""
        url = self._url(path)
        try:
            resp = requests.request(
                method, url, params=params, verify=self.verify, timeout=self.timeout
            )
            resp.raise_for_status()
            return resp
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to fetch data from {url}: {e}")
            raise DataSourceError(f"Request to {url} failed: {e}") from e

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("GET", path, params=params).json()

    @staticmethod
    def _region_path(partition: Partition) -> str:
        return "/" + quote(partition.full_path.strip("/"), safe="/")

    def member_name(self) -> str:
        return self._member_name

    def ping(self) -> bool:
        """Check that the REST service is up"""
        self._request("GET", "/ping")
        return True

    def list_partitions(self) -> List[Partition]:
        """Get all the regions served by the member"""
        regions = self._get("").get("regions", [])
        return build_partition_tree(region["name"] for region in regions)

    def entry_count(self, partition: Partition) -> int:
        """Get the region size from the Resource-Count header"""
        resp = self._request("HEAD", self._region_path(partition))
        count = resp.headers.get("Resource-Count")
        if count is None:
            raise DataSourceError(
                f"No Resource-Count header returned for region {partition.full_path}"
            )
        return int(count)

    def iterate_keys(self, partition: Partition) -> Iterator[Any]:
        """Get all the keys of the region"""
        keys = self._get(f"{self._region_path(partition)}/keys").get("keys", [])
        return iter(keys)

    def get(self, partition: Partition, key: Any) -> Any:
        """Get the value for a key, None when the key is gone"""
        path = f"{self._region_path(partition)}/{quote(str(key), safe='')}"
        try:
            return self._get(path)
        except DataSourceError as e:
            response = getattr(e.__cause__, "response", None)
            if response is not None and response.status_code == 404:
                return None
            raise

    @property
    def supports_bounded_fetch(self) -> bool:
        return True

    def fetch_bounded(self, partition: Partition, limit: int) -> List[Any]:
        """Fetch at most ``limit`` values with an ad-hoc OQL query"""
        query = f"SELECT * FROM {partition.full_path} LIMIT {int(limit)}"
        logger.debug("Running OQL query for region %s: %s", partition.full_path, query)
        results = self._get("/queries/adhoc", params={"q": query})
        if not isinstance(results, list):
            raise DataSourceError(
                f"Unexpected query response for region {partition.full_path}"
            )
        return results

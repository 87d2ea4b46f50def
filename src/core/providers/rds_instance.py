from typing import Any, Dict, Iterable

from .base import BaseTagProvider


class RDSInstanceTagProvider(BaseTagProvider):
    service = "rds"
    service_name = "RDS"
    resource_type = "DBInstance"
    list_error_message = "failed to describe RDS instances"

    def list_resources(self) -> Iterable[Dict[str, Any]]:
        resp = self.client.describe_db_instances()
        return resp.get("DBInstances", [])

    def resource_id(self, item: Dict[str, Any]) -> str:
        return item["DBInstanceIdentifier"]

    def fetch_tags(self, item: Dict[str, Any]) -> Dict[str, str]:
        # TagList vem junto no DescribeDBInstances
        return self._aws_tags_to_dict(item.get("TagList"))

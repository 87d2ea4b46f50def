from typing import Any, Dict, Iterable

from .base import BaseTagProvider


class EC2InstanceTagProvider(BaseTagProvider):
    service = "ec2"
    service_name = "EC2"
    resource_type = "Instance"
    list_error_message = "failed to describe EC2 instances"

    def list_resources(self) -> Iterable[Dict[str, Any]]:
        resp = self.client.describe_instances()
        for reservation in resp.get("Reservations", []):
            yield from reservation.get("Instances", [])

    def resource_id(self, item: Dict[str, Any]) -> str:
        return item["InstanceId"]

    def fetch_tags(self, item: Dict[str, Any]) -> Dict[str, str]:
        # DescribeInstances já devolve as tags de cada instância
        return self._aws_tags_to_dict(item.get("Tags"))

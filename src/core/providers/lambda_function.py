from typing import Any, Dict, Iterable

from .base import BaseTagProvider


class LambdaFunctionTagProvider(BaseTagProvider):
    service = "lambda"
    service_name = "Lambda"
    resource_type = "Function"
    list_error_message = "failed to list Lambda functions"

    def list_resources(self) -> Iterable[Dict[str, Any]]:
        resp = self.client.list_functions()
        return resp.get("Functions", [])

    def resource_id(self, item: Dict[str, Any]) -> str:
        return item["FunctionName"]

    def fetch_tags(self, item: Dict[str, Any]) -> Dict[str, str]:
        """
        Lambda retorna tags como dict {"key": "value"}, já no formato final.
        """
        resp = self.client.list_tags(Resource=item["FunctionArn"])
        return dict(resp.get("Tags", {}))

from typing import Any, Dict, Iterable

from botocore.exceptions import ClientError

from .base import BaseTagProvider


class S3BucketTagProvider(BaseTagProvider):
    service = "s3"
    service_name = "S3"
    resource_type = "Bucket"
    list_error_message = "failed to list S3 buckets"

    def list_resources(self) -> Iterable[Dict[str, Any]]:
        resp = self.client.list_buckets()
        return resp.get("Buckets", [])

    def resource_id(self, item: Dict[str, Any]) -> str:
        return item["Name"]

    def fetch_tags(self, item: Dict[str, Any]) -> Dict[str, str]:
        """
        Retorna as tags atuais do bucket em formato dict[str, str].
        Se o bucket não tiver TagSet, devolve {}.
        """
        try:
            response = self.client.get_bucket_tagging(Bucket=item["Name"])
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code == "NoSuchTagSet":
                # caminho feliz: bucket sem tags
                return {}
            # outros erros (AccessDenied, etc) ficam com a política da base
            raise

        return self._aws_tags_to_dict(response.get("TagSet"))

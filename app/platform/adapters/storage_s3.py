import boto3
from botocore.client import Config
from app.platform.ports.object_storage import ObjectStoragePort
from app.core.config import settings

class S3Storage(ObjectStoragePort):
    def __init__(self, client=None):
        if client is None:
            session = boto3.session.Session(
                aws_access_key_id=settings.S3_ACCESS_KEY,
                aws_secret_access_key=settings.S3_SECRET_KEY,
                region_name=settings.S3_REGION,
            )
            client = session.client(
                "s3",
                endpoint_url=settings.S3_ENDPOINT_URL,
                config=Config(signature_version="s3v4"),
            )
        self.s3 = client
        self.bucket = settings.S3_BUCKET

    def object_url(self, key: str) -> str:
        if settings.S3_ENDPOINT_URL:
            return f"{settings.S3_ENDPOINT_URL.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{settings.S3_REGION}.amazonaws.com/{key}"

    def presign_download(self, key: str, expires_seconds: int = 900) -> str:
        return self.s3.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=expires_seconds,
        )

    def put_bytes(self, key: str, data: bytes, content_type: str) -> None:
        self.s3.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=content_type)

    def delete(self, key: str) -> None:
        self.s3.delete_object(Bucket=self.bucket, Key=key)

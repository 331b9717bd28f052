from urllib.parse import quote

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from services.storage.base_storage import BaseStorage, StorageError


class S3Storage(BaseStorage):
    def __init__(self, bucket_name, client=None, public_url='', region='us-east-1'):
        self.s3 = client or boto3.client('s3', region_name=region)
        self.bucket = bucket_name
        self.public_url = public_url
        self.region = region

    @classmethod
    def from_config(cls, config):
        client = boto3.client(
            's3',
            region_name=config.get('S3_REGION'),
            endpoint_url=config.get('S3_ENDPOINT_URL'),
            aws_access_key_id=config.get('AWS_ACCESS_KEY'),
            aws_secret_access_key=config.get('AWS_SECRET_KEY'),
        )
        return cls(
            config['S3_BUCKET'],
            client=client,
            public_url=config.get('S3_PUBLIC_URL', ''),
            region=config.get('S3_REGION', 'us-east-1'),
        )

    def put(self, key, data, content_type=None):
        # 不压缩：download_url 直接由对象存储提供，必须与原文件一致
        extra = {'ContentType': content_type} if content_type else {}
        try:
            self.s3.put_object(Bucket=self.bucket, Key=key, Body=data, **extra)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"put {key} failed: {e}") from e
        return key

    def read(self, key):
        try:
            obj = self.s3.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') in ('NoSuchKey', '404'):
                return None
            raise StorageError(f"get {key} failed: {e}") from e
        except BotoCoreError as e:
            raise StorageError(f"get {key} failed: {e}") from e
        return obj['Body'].read()

    def get_public_url(self, key):
        if self.public_url:
            return f"{self.public_url.rstrip('/')}/{quote(key)}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{quote(key)}"

    def remove(self, keys):
        keys = list(keys)
        if not keys:
            return
        try:
            resp = self.s3.delete_objects(
                Bucket=self.bucket,
                Delete={'Objects': [{'Key': k} for k in keys], 'Quiet': True},
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"remove {keys} failed: {e}") from e
        errors = resp.get('Errors', [])
        if errors:
            raise StorageError(f"remove failed for {[err.get('Key') for err in errors]}")

    def list_keys(self):
        keys = []
        paginator = self.s3.get_paginator('list_objects_v2')
        try:
            for page in paginator.paginate(Bucket=self.bucket):
                for obj in page.get('Contents', []):
                    keys.append(obj['Key'])
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"list failed: {e}") from e
        return sorted(keys)

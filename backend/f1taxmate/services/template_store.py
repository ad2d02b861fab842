"""
PDF Template Store

Loads the fillable IRS and Illinois templates from the local forms directory
or from S3. Templates are versioned external assets; this module only
fetches bytes and never caches or modifies them.
"""

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional
import boto3
from botocore.exceptions import ClientError, NoCredentialsError
import structlog

from f1taxmate.core.config import settings
from f1taxmate.core.exceptions import TemplateFetchError, TemplateNotFoundError
from f1taxmate.monitoring.metrics import metrics_collector

logger = structlog.get_logger()


class TemplateStore(ABC):
    """Base template store: timeout handling around a blocking read"""

    def __init__(self, timeout_seconds: Optional[float] = None):
        self.timeout_seconds = timeout_seconds or settings.TEMPLATE_FETCH_TIMEOUT_SECONDS

    @abstractmethod
    def _read(self, relative_path: str) -> bytes:
        """Blocking read of one template; runs in a worker thread"""

    async def load(self, relative_path: str) -> bytes:
        """
        Fetch template bytes

        Args:
            relative_path: Path such as "federal_forms/f8843.pdf"

        Returns:
            Raw PDF bytes

        Raises:
            TemplateNotFoundError: the template does not exist
            TemplateFetchError: the store timed out or failed in transport
        """
        try:
            content = await asyncio.wait_for(
                asyncio.to_thread(self._read, relative_path),
                timeout=self.timeout_seconds,
            )
            metrics_collector.increment_counter("template_fetches")
            logger.info("Template loaded", template=relative_path, size_bytes=len(content))
            return content

        except TemplateNotFoundError:
            logger.error("Template not found", template=relative_path)
            raise
        except asyncio.TimeoutError as e:
            logger.error("Template fetch timed out",
                        template=relative_path,
                        timeout_seconds=self.timeout_seconds)
            raise TemplateFetchError(
                f"Timed out loading template {relative_path}", template=relative_path
            ) from e
        except TemplateFetchError:
            raise
        except Exception as e:
            logger.error("Template fetch failed", template=relative_path, error=str(e))
            raise TemplateFetchError(
                f"Failed to load template {relative_path}: {str(e)}", template=relative_path
            ) from e


class FileSystemTemplateStore(TemplateStore):
    """Templates under a local directory (federal_forms/, FICA_forms/, illinois_forms/)"""

    def __init__(self, root: Optional[str] = None, timeout_seconds: Optional[float] = None):
        super().__init__(timeout_seconds)
        self.root = Path(root or settings.TEMPLATE_DIR)

    def _read(self, relative_path: str) -> bytes:
        path = self.root / relative_path
        if not path.is_file():
            raise TemplateNotFoundError(f"Template {relative_path} not found", template=relative_path)
        return path.read_bytes()


class S3TemplateStore(TemplateStore):
    """Templates in the S3 templates bucket under a key prefix"""

    def __init__(
        self,
        bucket: Optional[str] = None,
        prefix: Optional[str] = None,
        s3_client=None,
        timeout_seconds: Optional[float] = None,
    ):
        super().__init__(timeout_seconds)
        self.bucket = bucket or settings.S3_BUCKET_TEMPLATES
        self.prefix = settings.S3_TEMPLATE_PREFIX if prefix is None else prefix
        self.s3_client = s3_client or boto3.client(
            's3',
            region_name=settings.AWS_REGION,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY
        )

    def _read(self, relative_path: str) -> bytes:
        key = f"{self.prefix}{relative_path}"
        try:
            response = self.s3_client.get_object(Bucket=self.bucket, Key=key)
            return response['Body'].read()

        except NoCredentialsError as e:
            raise TemplateFetchError("AWS credentials not configured", template=relative_path) from e
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code')
            if error_code in ('NoSuchKey', '404'):
                raise TemplateNotFoundError(
                    f"Template {relative_path} not found in bucket {self.bucket}",
                    template=relative_path,
                ) from e
            raise TemplateFetchError(
                f"S3 error loading template {relative_path}: {str(e)}", template=relative_path
            ) from e


def get_template_store() -> TemplateStore:
    """Template store for the configured source"""
    if settings.TEMPLATE_SOURCE == "s3":
        return S3TemplateStore()
    return FileSystemTemplateStore()

"""
Sample Data
Copies a local directory tree into the data lake bucket
"""
import mimetypes
from pathlib import Path
from typing import Dict, List, Optional

import pulumi
import pulumi_aws as aws


def upload_data_assets(bucket_info: Dict[str, any],
                       source_dir: str,
                       key_prefix: str,
                       depends_on: Optional[List[pulumi.Resource]] = None) -> List[aws.s3.BucketObjectv2]:
    """
    Upload every file under source_dir to s3://<bucket>/<key_prefix><relative path>

    Args:
        bucket_info: Bucket dict from create_bucket
        source_dir: Local directory
        key_prefix: Key prefix, normally "<database>/"
        depends_on: Resources to wait for (encryption must be in place first)

    Returns:
        List of bucket objects, empty when the directory does not exist
    """
    root = Path(source_dir)
    if not root.is_dir():
        pulumi.log.warn(f"Data asset directory {source_dir} not found, nothing uploaded")
        return []

    objects = []
    for path in sorted(p for p in root.rglob("*") if p.is_file()):
        relative = path.relative_to(root).as_posix()
        key = f"{key_prefix}{relative}"
        content_type, _ = mimetypes.guess_type(path.name)

        objects.append(aws.s3.BucketObjectv2(f"data-asset-{relative.replace('/', '-')}",
            bucket=bucket_info["bucket"].id,
            key=key,
            source=pulumi.FileAsset(str(path)),
            content_type=content_type or "application/octet-stream",
            opts=pulumi.ResourceOptions(depends_on=depends_on or [])))

    pulumi.log.info(f"Uploading {len(objects)} file(s) to s3://{bucket_info['bucket_name']}/{key_prefix}")
    return objects

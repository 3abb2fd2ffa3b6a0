"""Machine image selection per region."""

from ecs_launch.core.deployments.aws_ecs.errors import UnsupportedRegion

# ECS-optimised Amazon Linux images.
REGION_IMAGES: dict[str, str] = {
    "us-east-1": "ami-6ff4bd05",
    "us-west-1": "ami-46cda526",
    "us-west-2": "ami-313d2150",
    "eu-west-1": "ami-8073d3f3",
    "eu-central-1": "ami-60627e0c",
    "ap-northeast-1": "ami-6ca38b02",
    "ap-southeast-1": "ami-a6ba79c5",
    "ap-southeast-2": "ami-00e7bf63",
}


def resolve_image_id(region: str, override: str | None = None) -> str:
    """Return the image id for a region.

    An explicit override wins over the table. Regions missing from the table
    are rejected rather than provisioned with an empty image.
    """
    if override and override.strip():
        return override.strip()
    image_id = REGION_IMAGES.get(region, "")
    if not image_id:
        raise UnsupportedRegion(region)
    return image_id

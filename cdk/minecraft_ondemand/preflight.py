"""
Refuse to deploy the compute stack until the DNS stack has published its
hosted zone id.

    python -m minecraft_ondemand.preflight -p MinecraftHostedZoneId -r us-east-1

Exits 1 and names the missing parameter when the DNS stack has not been
deployed yet.
"""

import argparse
import logging
import sys

from botocore.exceptions import BotoCoreError, ClientError

from minecraft_ondemand.config import DNS_REGION
from minecraft_ondemand.errors import CrossUnitOrderingViolation, LookupFailure
from minecraft_ondemand.ssm_parameter_reader import read_parameter


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def ensure_published(name: str, region: str = DNS_REGION, client=None) -> str:
    """Return the published value or raise CrossUnitOrderingViolation."""
    try:
        return read_parameter(name=name, region=region, client=client)
    except LookupFailure as ex:
        raise CrossUnitOrderingViolation(
            f"Parameter {name} is not published in {region}. "
            "Deploy the DNS stack before the ECS stack."
        ) from ex


def main(argv=None) -> int:
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")

    parser = argparse.ArgumentParser()
    parser.add_argument("-p", "--parameter-name", required=True)
    parser.add_argument("-r", "--region", default=DNS_REGION)
    args = parser.parse_args(argv)

    try:
        value = ensure_published(name=args.parameter_name, region=args.region)
    except LookupFailure as ex:
        logger.error("%s", ex)
        return 1
    except (BotoCoreError, ClientError) as ex:
        logger.error(f"Could not read {args.parameter_name} in {args.region}: {ex}")
        return 1

    print(value)
    return 0


if __name__ == "__main__":
    sys.exit(main())

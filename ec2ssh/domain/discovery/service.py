"""
Discovery domain service - EC2 instance enumeration
"""
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Dict, Iterable, List, Sequence

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ...core.constants import (
    DEFAULT_MAX_WORKERS,
    FALLBACK_TAG,
    NAME_TAG_KEY,
    ROLE_SESSION_NAME,
    RUNNING_FILTER,
)
from ...core.exceptions import DiscoveryError
from ...core.logging import get_logger
from ..profiles.store import ProfileStore
from .models import DiscoveryTarget, DiscoveredInstance

logger = get_logger(__name__)

SessionFactory = Callable[..., Any]


def name_tag(raw_instance: Dict[str, Any]) -> str:
    """Name tag value of an API instance entry, or the fallback label"""
    name = FALLBACK_TAG
    for tag in raw_instance.get("Tags") or []:
        if tag.get("Key") == NAME_TAG_KEY and tag.get("Value"):
            name = tag["Value"]
    return name


def suggestion(tag: str, address: str) -> str:
    """Completion suggestion for an instance"""
    return f"{tag}:{address}"


class DiscoveryService:
    """
    Lists reachable EC2 instances and records them in the profile store.

    Targets are queried in parallel. A target that fails (API error,
    denied role assumption) contributes nothing and never fails the pass.
    Store updates are applied afterwards on the calling thread, in target
    order then API order, so duplicate names get deterministic suffixes.
    """

    def __init__(
        self,
        store: ProfileStore,
        session_factory: SessionFactory = boto3.Session,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        """
        Initialize discovery service.

        Args:
            store: Profile store receiving discovered instances
            session_factory: Callable returning a boto3-compatible session
            max_workers: Maximum concurrent target queries
        """
        self.store = store
        self.session_factory = session_factory
        self.max_workers = max(1, max_workers)

    def targets(self, regions: Sequence[str], roles: Sequence[str] = ()) -> List[DiscoveryTarget]:
        """
        Build the target list: every region, then every role in every region.

        Falls back to the default session region when none is configured.
        """
        regions = list(regions)
        if not regions:
            default_region = self.session_factory().region_name
            if default_region:
                regions = [default_region]

        targets = [DiscoveryTarget(region) for region in regions]
        for role_arn in roles:
            targets.extend(DiscoveryTarget(region, role_arn) for region in regions)
        return targets

    def discover(self, regions: Sequence[str], roles: Sequence[str] = ()) -> List[str]:
        """
        Run one discovery pass.

        Args:
            regions: Region names to query
            roles: Role ARNs to assume, each queried in every region

        Returns:
            Deduplicated "tag:address" suggestions in encounter order
        """
        targets = self.targets(regions, roles)
        if not targets:
            logger.warning("No region configured and no default region available")
            return []

        results = self.fetch_all(targets)

        suggestions: List[str] = []
        seen = set()
        for target in targets:
            for instance in results.get(target, []):
                profile = self.store.update_profile(
                    instance.instance_id,
                    address=instance.address,
                    tag=instance.name,
                )
                value = suggestion(profile.tag or instance.name, instance.address)
                if value not in seen:
                    seen.add(value)
                    suggestions.append(value)
        return suggestions

    def fetch_all(self, targets: Iterable[DiscoveryTarget]) -> Dict[DiscoveryTarget, List[DiscoveredInstance]]:
        """Query all targets concurrently; failed targets map to an empty list"""
        results: Dict[DiscoveryTarget, List[DiscoveredInstance]] = {}

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {executor.submit(self.fetch, target): target for target in targets}

            for future in as_completed(futures):
                target = futures[future]
                try:
                    results[target] = future.result()
                except DiscoveryError as e:
                    logger.warning("Discovery failed for %s: %s", target, e)
                    results[target] = []
                except Exception:
                    logger.exception("Unexpected discovery failure for %s", target)
                    results[target] = []

        return results

    def fetch(self, target: DiscoveryTarget) -> List[DiscoveredInstance]:
        """
        List running instances with a public address for one target.

        Raises:
            DiscoveryError: If the role cannot be assumed or the API call fails
        """
        try:
            session = self._session_for(target)
            ec2 = session.client("ec2", region_name=target.region)
            paginator = ec2.get_paginator("describe_instances")

            instances: List[DiscoveredInstance] = []
            for page in paginator.paginate(Filters=[RUNNING_FILTER]):
                for reservation in page.get("Reservations", []):
                    for raw in reservation.get("Instances", []):
                        if not raw.get("PublicIpAddress"):
                            continue
                        instances.append(DiscoveredInstance.from_api(raw, name_tag(raw)))
        except (BotoCoreError, ClientError) as e:
            raise DiscoveryError(str(e)) from e

        logger.debug("Found %d reachable instances in %s", len(instances), target)
        return instances

    def _session_for(self, target: DiscoveryTarget) -> Any:
        """Session for a target, assuming its role when one is set"""
        if not target.role_arn:
            return self.session_factory()

        sts = self.session_factory().client("sts", region_name=target.region)
        response = sts.assume_role(RoleArn=target.role_arn, RoleSessionName=ROLE_SESSION_NAME)
        credentials = response["Credentials"]
        return self.session_factory(
            aws_access_key_id=credentials["AccessKeyId"],
            aws_secret_access_key=credentials["SecretAccessKey"],
            aws_session_token=credentials["SessionToken"],
        )

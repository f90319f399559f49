"""User-facing description of a devpod and its boundary parsing."""
import dataclasses
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from kubernetes.utils import parse_quantity

from ..const import (
    DEFAULT_SERVICE_ACCOUNT,
    DEFAULT_SHELL,
    DEFAULT_STORAGE_CLASS,
    DEFAULT_STORAGE_SIZE,
    DEFAULT_WORKDIR,
)
from ..errors import InvalidResourceQuantity, ValidationError

KeyValue = Tuple[str, str]

REQUIRED_FIELDS = ("name", "image", "namespace")


def parse_pairs(entries: Optional[Iterable[str]]) -> List[KeyValue]:
    """
    Parses repeatable ``key=value`` options into ordered pairs.

    Entries without a ``=`` or with an empty key are dropped. Everything after
    the first ``=`` belongs to the value, so ``A=b=c`` yields ``("A", "b=c")``.
    Duplicate keys are kept in the order given.
    """
    pairs: List[KeyValue] = []
    for entry in entries or ():
        key, sep, value = entry.partition("=")
        if not sep or not key:
            continue
        pairs.append((key, value))
    return pairs


def validate_quantity(field: str, value: str) -> None:
    """Checks a resource quantity with the Kubernetes client's parser."""
    try:
        parse_quantity(value)
    except ValueError as e:
        raise InvalidResourceQuantity(field, value) from e


@dataclass(frozen=True)
class DevpodSpec:
    name: str
    image: str
    namespace: str
    service_account: Optional[str] = None
    claim_name: Optional[str] = None
    workdir: Optional[str] = None
    cpu_limit: Optional[str] = None
    mem_limit: Optional[str] = None
    labels: Tuple[KeyValue, ...] = ()
    env: Tuple[KeyValue, ...] = ()
    node_selector: Tuple[KeyValue, ...] = ()
    shell: Optional[str] = None
    storage_class: Optional[str] = None
    storage_size: Optional[str] = None

    @classmethod
    def from_options(
        cls,
        *,
        labels: Iterable[str] = (),
        env: Iterable[str] = (),
        node_selector: Iterable[str] = (),
        **fields: Optional[str],
    ) -> "DevpodSpec":
        """Builds a spec from raw ``key=value`` option strings."""
        return cls(
            labels=tuple(parse_pairs(labels)),
            env=tuple(parse_pairs(env)),
            node_selector=tuple(parse_pairs(node_selector)),
            **fields,
        )

    def validate(self) -> None:
        missing = [f for f in REQUIRED_FIELDS if not getattr(self, f)]
        if missing:
            raise ValidationError(
                f"missing required devpod field(s): {', '.join(missing)}"
            )

        for field, value in (
            ("cpu", self.cpu_limit),
            ("memory", self.mem_limit),
            ("storage", self.storage_size),
        ):
            if value is not None:
                validate_quantity(field, value)

    def with_defaults(self) -> "DevpodSpec":
        """Returns a copy with every unset optional field defaulted."""
        return dataclasses.replace(
            self,
            service_account=self.service_account or DEFAULT_SERVICE_ACCOUNT,
            claim_name=self.claim_name or self.name,
            workdir=self.workdir or DEFAULT_WORKDIR,
            cpu_limit=self.cpu_limit or None,
            mem_limit=self.mem_limit or None,
            shell=self.shell or DEFAULT_SHELL,
            storage_class=self.storage_class or DEFAULT_STORAGE_CLASS,
            storage_size=self.storage_size or DEFAULT_STORAGE_SIZE,
        )

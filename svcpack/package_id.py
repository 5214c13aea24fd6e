"""Package identities and ordered package sets.

A package id is the canonical ``name;version;arch;data`` string used by the
package-management service. The data section names the repository a
package comes from (or ``installed``) and is not part of the identity used
for matching.
"""

from typing import Iterable, Iterator, Optional

from pydantic import BaseModel, ConfigDict

SEPARATOR = ";"


class PackageIdentity(BaseModel):
    """One package artifact"""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    arch: str
    data: str = ""

    @staticmethod
    def check(text: str) -> bool:
        """Return True if text is a complete package id

        Args:
            text: Candidate package id, e.g. "foo;1.0;amd64;fedora"

        Returns:
            True when there are exactly four sections and name, version
            and arch are set
        """
        sections = text.split(SEPARATOR)
        if len(sections) != 4:
            return False
        name, version, arch, _ = sections
        return bool(name and version and arch)

    @classmethod
    def from_string(cls, text: str) -> "PackageIdentity":
        if not cls.check(text):
            raise ValueError(f"Invalid package id: {text!r}")
        name, version, arch, data = text.split(SEPARATOR)
        return cls(name=name, version=version, arch=arch, data=data)

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.name, self.version, self.arch)

    def printable(self) -> str:
        return f"{self.name}-{self.version}.{self.arch}"

    def __str__(self) -> str:
        return SEPARATOR.join((self.name, self.version, self.arch, self.data))


class PackageSet:
    """Ordered collection of unique package identities.

    Iteration follows discovery order, membership uses the identity key so
    the same package never appears twice.
    """

    def __init__(self, identities: Optional[Iterable[PackageIdentity]] = None):
        self._items: list[PackageIdentity] = []
        self._index: set[tuple[str, str, str]] = set()
        for identity in identities or []:
            self.add(identity)

    @classmethod
    def from_ids(cls, package_ids: Iterable[str]) -> "PackageSet":
        return cls(PackageIdentity.from_string(p) for p in package_ids)

    def add(self, identity: PackageIdentity) -> bool:
        if identity.key in self._index:
            return False
        self._index.add(identity.key)
        self._items.append(identity)
        return True

    def remove(self, identity: PackageIdentity) -> bool:
        if identity.key not in self._index:
            return False
        self._index.remove(identity.key)
        self._items = [i for i in self._items if i.key != identity.key]
        return True

    def package_ids(self) -> list[str]:
        return [str(identity) for identity in self._items]

    def __contains__(self, identity: PackageIdentity) -> bool:
        return identity.key in self._index

    def __iter__(self) -> Iterator[PackageIdentity]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> PackageIdentity:
        return self._items[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, PackageSet):
            return NotImplemented
        return [i.key for i in self._items] == [i.key for i in other._items]

    def __repr__(self) -> str:
        return f"<PackageSet({self.package_ids()})>"

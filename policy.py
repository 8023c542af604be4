"""Host and referer policy for audio relaying.

Maps each media source key to the hostnames it may serve audio from and to
the Referer its hosts expect. The table is built once at import and only read
afterwards.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Pattern, Sequence, Tuple

# Domains each source may serve audio from. Every entry also covers subdomains.
AUDIO_HOST_WHITELIST: Dict[str, List[str]] = {
    "kuwo": ["kuwo.cn"],
    "netease": ["music.126.net", "music.163.com", "163.com"],
    "joox": ["joox.com", "jooxcdn.com", "qqmusic.qq.com", "stream.qqmusic.qq.com"],
}

AUDIO_REFERER_BY_SOURCE: Dict[str, str] = {
    "kuwo": "https://www.kuwo.cn/",
    "netease": "https://music.163.com/",
    "joox": "https://www.joox.com/",
}


@dataclass(frozen=True)
class HostPattern:
    """A registered domain, matching itself and any of its subdomains."""

    domain: str
    _regex: Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        regex = re.compile(r"(?:.+\.)?" + re.escape(self.domain), re.IGNORECASE)
        object.__setattr__(self, "_regex", regex)

    def matches(self, hostname: str) -> bool:
        return bool(hostname) and self._regex.fullmatch(hostname) is not None


class PolicyTable:
    """Read-only lookup of host patterns and referers by source key.

    Host patterns and referers are looked up independently: a source may have
    patterns without a referer and the other way round.
    """

    def __init__(self, host_patterns: Mapping[str, Sequence[str]], referers: Mapping[str, str]):
        patterns: Dict[str, Tuple[HostPattern, ...]] = {}
        for key, domains in host_patterns.items():
            if not domains:
                raise ValueError(f"Source {key!r} needs at least one host pattern")
            patterns[key.lower()] = tuple(HostPattern(domain) for domain in domains)

        self._patterns = MappingProxyType(patterns)
        self._referers = MappingProxyType({key.lower(): value for key, value in referers.items()})
        self._aggregate = tuple(p for group in patterns.values() for p in group)

    @property
    def sources(self) -> Tuple[str, ...]:
        return tuple(self._patterns)

    @property
    def aggregate_patterns(self) -> Tuple[HostPattern, ...]:
        """Union of every source's patterns, in registration order."""
        return self._aggregate

    def host_patterns_for(self, source: Optional[str]) -> Tuple[HostPattern, ...]:
        """Patterns for a known source, or the aggregate list otherwise."""
        return self._patterns.get(_normalize_source(source), self._aggregate)

    def is_allowed_host(self, hostname: str, source: Optional[str] = None) -> bool:
        if not hostname:
            return False
        return any(pattern.matches(hostname) for pattern in self.host_patterns_for(source))

    def matching_source(self, hostname: str) -> Optional[str]:
        """First source, in registration order, whose patterns match hostname."""
        for key, patterns in self._patterns.items():
            if any(pattern.matches(hostname) for pattern in patterns):
                return key
        return None

    def referer_for(self, source: Optional[str], hostname: str) -> Optional[str]:
        """Resolve the Referer to send upstream.

        A known source with a configured referer wins. Otherwise the referer of
        the first source whose patterns match hostname is used, if any.
        """
        key = _normalize_source(source)
        if key and key in self._referers:
            return self._referers[key]

        matched = self.matching_source(hostname)
        if matched is None:
            return None
        return self._referers.get(matched)


def _normalize_source(source: Optional[str]) -> str:
    return (source or "").lower()


DEFAULT_POLICY = PolicyTable(AUDIO_HOST_WHITELIST, AUDIO_REFERER_BY_SOURCE)

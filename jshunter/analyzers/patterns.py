"""
Detection pattern table and false-positive exclusions.
Adding a detector is a table edit: (regex, name, category, description).
"""

import re
from typing import List, Tuple

from jshunter.models import Category, PatternRule


EXCLUSION_PATTERNS = [
    r'demo',
    r'test',
    r'sample',
    r'todo',
    r'example',
    r'placeholder',
    r'localhost',
    r'127\.0\.0\.1',
    r'0\.0\.0\.0',
    r'\bfoo\b',
    r'\bbar\b',
    r'\bbaz\b',
    r'\bdummy\b',
    r'\bmock\b',
    r'\bfake\b',
]

_URL_TAIL = r'[^\s"\'<>\[\]{}|\\^`]'

ENDPOINT_PATTERNS = [
    (r'https?://' + _URL_TAIL + r'+', 'HTTP/HTTPS URLs', Category.ENDPOINT, 'Absolute HTTP/HTTPS URLs', re.IGNORECASE),
    (r'/[a-zA-Z0-9_\-/.]+(?:\?' + _URL_TAIL + r'*)?(?=#|$|[\s"\'<>\[\]{}|\\^`])', 'Relative API Paths', Category.ENDPOINT, 'Relative API paths starting with /', 0),
    (r'["\']/?api/[a-zA-Z0-9_\-/.:?&=]+["\']', 'API Endpoints with Parameters', Category.ENDPOINT, 'API endpoints containing /api/', re.IGNORECASE),
]

SECRET_PATTERNS = [
    (r'AKIA[0-9A-Z]{16}', 'AWS Access Key', Category.SECRET, 'AWS Access Key ID', 0),
    (r'[A-Za-z0-9/+=]{40}', 'AWS Secret Key', Category.SECRET, 'Potential AWS Secret Access Key (40 chars)', 0),
    (r'AIza[0-9A-Za-z\-_]{35}', 'Google API Key', Category.SECRET, 'Google API Key', 0),
    (r'xox[baprs]-[0-9A-Za-z]{10,48}', 'Slack Token', Category.SECRET, 'Slack API Token', 0),
    (r'sk_live_[0-9a-zA-Z]{24}', 'Stripe Live Key', Category.SECRET, 'Stripe Live Secret Key', 0),
    (r'pk_live_[0-9a-zA-Z]{24}', 'Stripe Publishable Key', Category.SECRET, 'Stripe Live Publishable Key', 0),
    (r'ghp_[0-9A-Za-z]{36}', 'GitHub Personal Access Token', Category.SECRET, 'GitHub Personal Access Token', 0),
    (r'gho_[0-9A-Za-z]{36}', 'GitHub OAuth Token', Category.SECRET, 'GitHub OAuth Token', 0),
    (r'eyJ[A-Za-z0-9\-_]{10,}\.[A-Za-z0-9\-_]{10,}\.[A-Za-z0-9\-_]{5,}', 'JWT Token', Category.SECRET, 'JSON Web Token (JWT)', 0),
    (r'["\']?[a-zA-Z0-9_\-]*[aA][pP][iI][_\-]?[kK][eE][yY]["\']?\s*[:=]\s*["\']?[a-zA-Z0-9_\-]{16,}["\']?', 'Generic API Key', Category.SECRET, 'Generic API key patterns', 0),
    (r'(?:mongodb|mysql|postgresql|redis)://' + _URL_TAIL + r'+', 'Database Connection String', Category.SECRET, 'Database connection strings', re.IGNORECASE),
    (r'-----BEGIN (?:RSA |EC |DSA |OPENSSH )?PRIVATE KEY-----', 'Private Key', Category.SECRET, 'PEM encoded private key header', 0),
]

EMAIL_PATTERNS = [
    (r'[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}', 'Email Address', Category.EMAIL, 'Email addresses', 0),
]

IP_PATTERNS = [
    (r'\b10\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\b', 'Private IPv4 (10.x.x.x)', Category.IP_ADDRESS, 'Private IPv4 addresses (10.x.x.x)', 0),
    (r'\b192\.168\.[0-9]{1,3}\.[0-9]{1,3}\b', 'Private IPv4 (192.168.x.x)', Category.IP_ADDRESS, 'Private IPv4 addresses (192.168.x.x)', 0),
    (r'\b172\.(?:1[6-9]|2\d|3[0-1])\.[0-9]{1,3}\.[0-9]{1,3}\b', 'Private IPv4 (172.16-31.x.x)', Category.IP_ADDRESS, 'Private IPv4 addresses (172.16-31.x.x)', 0),
    (r'\b127\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\b', 'Loopback IPv4', Category.IP_ADDRESS, 'Loopback IPv4 addresses', 0),
    (r'\bfc00:[0-9a-fA-F:]+\b', 'Private IPv6', Category.IP_ADDRESS, 'Private IPv6 addresses (fc00::/7)', 0),
    (r'\bfe80:[0-9a-fA-F:]+\b', 'Link-local IPv6', Category.IP_ADDRESS, 'Link-local IPv6 addresses', 0),
]

# generic catch-alls run last so specific detectors claim their values first
GENERIC_SECRET_PATTERNS = [
    (r'["\']?(?:secret|password|passwd|pwd|token|key)["\']?\s*[:=]\s*["\'][^"\'\s]{8,}["\']', 'Generic Secret/Password', Category.SECRET, 'Generic secret/password patterns', re.IGNORECASE),
    (r'["\'][A-Za-z0-9+/]{40,}={0,2}["\']', 'Base64 Encoded Data', Category.SECRET, 'Potential Base64 encoded secrets', 0),
]


def _compile_rules(groups: List[List[Tuple]]) -> Tuple[PatternRule, ...]:
    rules = []
    seen_names = set()
    for group in groups:
        for pattern, name, category, description, flags in group:
            if name in seen_names:
                raise ValueError(f"Duplicate pattern name: {name}")
            seen_names.add(name)
            rules.append(PatternRule(
                name=name,
                regex=re.compile(pattern, flags),
                category=category,
                description=description
            ))
    return tuple(rules)


DETECTION_PATTERNS = _compile_rules([
    ENDPOINT_PATTERNS,
    SECRET_PATTERNS,
    EMAIL_PATTERNS,
    IP_PATTERNS,
    GENERIC_SECRET_PATTERNS,
])

COMPILED_EXCLUSIONS = tuple(re.compile(p, re.IGNORECASE) for p in EXCLUSION_PATTERNS)


def should_exclude(candidate: str) -> bool:
    return any(rx.search(candidate) for rx in COMPILED_EXCLUSIONS)

from adapters.domain_list.loader import load_domain_list, parse_domain_list
from adapters.domain_list.models import DomainEntry, DomainListFile

__all__ = [
    "DomainEntry",
    "DomainListFile",
    "load_domain_list",
    "parse_domain_list",
]

"""Tests for the system resolver wrapper.

`getaddrinfo` is patched so the tests never touch the network.
"""

import asyncio
import socket
from unittest.mock import AsyncMock, patch

import pytest

from adapters.dns_resolver import SystemResolver
from core.domain.errors import ResolutionFailure
from core.domain.models import FailureKind


def info(ip: str, family: int = socket.AF_INET) -> tuple:
    return (family, socket.SOCK_STREAM, 6, "", (ip, 0))


class TestSystemResolver:
    @pytest.mark.asyncio
    async def test_returns_unique_ipv4_in_order(self):
        resolver = SystemResolver(timeout=1.0)
        answers = [info("93.184.216.34"), info("93.184.216.35"), info("93.184.216.34")]

        with patch.object(resolver, "_getaddrinfo", AsyncMock(return_value=answers)):
            ips = await resolver.resolve("example.com")

        assert ips == ("93.184.216.34", "93.184.216.35")

    @pytest.mark.asyncio
    async def test_ignores_non_ipv4_entries(self):
        resolver = SystemResolver(timeout=1.0)
        answers = [info("2606:2800::1", socket.AF_INET6), info("1.2.3.4")]

        with patch.object(resolver, "_getaddrinfo", AsyncMock(return_value=answers)):
            assert await resolver.resolve("example.com") == ("1.2.3.4",)

    @pytest.mark.asyncio
    async def test_empty_answer_is_no_ipv4_failure(self):
        resolver = SystemResolver(timeout=1.0)

        with patch.object(resolver, "_getaddrinfo", AsyncMock(return_value=[])):
            with pytest.raises(ResolutionFailure) as excinfo:
                await resolver.resolve("v6only.example")

        assert excinfo.value.no_ipv4 is True
        assert excinfo.value.to_info().kind == FailureKind.RESOLUTION

    @pytest.mark.asyncio
    async def test_gaierror_becomes_resolution_failure(self):
        resolver = SystemResolver(timeout=1.0)
        error = socket.gaierror(socket.EAI_NONAME, "Name or service not known")

        with patch.object(resolver, "_getaddrinfo", AsyncMock(side_effect=error)):
            with pytest.raises(ResolutionFailure) as excinfo:
                await resolver.resolve("does-not-exist.invalid")

        assert excinfo.value.no_ipv4 is False
        assert "does-not-exist.invalid" in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_timeout_becomes_resolution_failure(self):
        resolver = SystemResolver(timeout=0.01)

        async def slow(name):
            await asyncio.sleep(1)
            return [info("1.2.3.4")]

        with patch.object(resolver, "_getaddrinfo", AsyncMock(side_effect=slow)):
            with pytest.raises(ResolutionFailure) as excinfo:
                await resolver.resolve("slow.example")

        assert "timed out" in str(excinfo.value)

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValueError):
            SystemResolver(timeout=0)

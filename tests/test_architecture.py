"""Architectural boundary tests using pytest-archon.

The package follows a ports-and-adapters layout:
- Domain models, ports and services never reach outwards
- Application services only talk to domain ports
- Backend adapters are independent of each other's parsers
"""

from pytest_archon import archrule


def test_domain_models_have_no_dependencies() -> None:
    """Domain models should only import the standard library and other domain models."""
    (
        archrule("domain models", comment="Domain models should be independent")
        .match("transit_journeys.domain.models*")
        .should_not_import("transit_journeys.adapters*")
        .should_not_import("transit_journeys.application*")
        .should_not_import("transit_journeys.domain.ports*")
        .should_not_import("transit_journeys.domain.services*")
        .may_import("transit_journeys.domain.models*")
        .check("transit_journeys")
    )


def test_domain_ports_have_no_dependencies() -> None:
    """Domain ports (interfaces) should not import adapters or application."""
    (
        archrule("domain ports", comment="Domain ports should be independent")
        .match("transit_journeys.domain.ports*")
        .should_not_import("transit_journeys.adapters*")
        .should_not_import("transit_journeys.application*")
        .may_import("transit_journeys.domain*")
        .check("transit_journeys")
    )


def test_domain_services_stay_in_domain() -> None:
    """Pagination and location rules must be usable by every backend."""
    (
        archrule("domain services", comment="Domain services depend only on domain")
        .match("transit_journeys.domain.services*")
        .should_not_import("transit_journeys.adapters*")
        .should_not_import("transit_journeys.application*")
        .should_not_import("aiohttp")
        .may_import("transit_journeys.domain*")
        .check("transit_journeys")
    )


def test_application_services_dont_import_adapters() -> None:
    """Application services should not depend on adapters (infrastructure layer)."""
    (
        archrule(
            "application services", comment="Application services should not depend on adapters"
        )
        .match("transit_journeys.application*")
        .should_not_import("transit_journeys.adapters*")
        .may_import("transit_journeys.domain*")
        .may_import("transit_journeys.application*")
        .check("transit_journeys")
    )


def test_adapters_dont_import_application() -> None:
    """Adapters should not import application services (to avoid cycles)."""
    (
        archrule(
            "adapters independence", comment="Adapters should not depend on application services"
        )
        .match("transit_journeys.adapters*")
        .should_not_import("transit_journeys.application*")
        .may_import("transit_journeys.domain*")
        .may_import("transit_journeys.adapters*")
        .check("transit_journeys", only_direct_imports=True)
    )


def test_backends_dont_import_each_other() -> None:
    """The OpenTripPlanner and transport.rest adapters share only common helpers."""
    (
        archrule("otp independence", comment="OTP adapter must not use FPTF parsers")
        .match("transit_journeys.adapters.otp_api*")
        .should_not_import("transit_journeys.adapters.fptf_api*")
        .should_not_import("transit_journeys.adapters.mvg_api*")
        .check("transit_journeys", only_direct_imports=True)
    )
    (
        archrule("fptf independence", comment="FPTF adapter must not use OTP parsers")
        .match("transit_journeys.adapters.fptf_api*")
        .should_not_import("transit_journeys.adapters.otp_api*")
        .should_not_import("transit_journeys.adapters.mvg_api*")
        .check("transit_journeys", only_direct_imports=True)
    )


def test_no_circular_dependencies_in_domain() -> None:
    """Domain layer should not have circular dependencies."""
    (
        archrule("domain no cycles", comment="Domain layer should not have circular dependencies")
        .match("transit_journeys.domain*")
        .should_not_import("transit_journeys.adapters*")
        .should_not_import("transit_journeys.application*")
        .may_import("transit_journeys.domain*")
        .check("transit_journeys", only_direct_imports=True)
    )


def test_cli_goes_through_composition_root() -> None:
    """CLI should obtain providers from main, not construct backend adapters itself."""
    (
        archrule("CLI independence", comment="CLI should not depend on backend adapters")
        .match("transit_journeys.cli")
        .should_not_import("transit_journeys.adapters.otp_api*")
        .should_not_import("transit_journeys.adapters.fptf_api*")
        .should_not_import("transit_journeys.adapters.mvg_api*")
        .may_import("transit_journeys.domain*")
        .may_import("transit_journeys.main")
        .may_import("transit_journeys.adapters.config*")
        .check("transit_journeys", only_direct_imports=True)
    )

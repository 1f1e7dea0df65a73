"""Architecture tests enforcing layer boundaries.

The tenancy bounded context follows a ports-and-adapters layout: the
domain is framework-free, the application layer depends on ports only,
and adapters (infrastructure, presentation) sit at the edges.
"""

from pytest_archon import archrule


class TestTenancyDomainLayer:
    """Tests for the tenancy domain layer."""

    def test_domain_does_not_import_outer_layers(self):
        """Domain objects should not depend on application or adapters."""
        (
            archrule("tenancy_domain_isolated")
            .match("tenancy.domain*")
            .should_not_import(
                "tenancy.application*",
                "tenancy.infrastructure*",
                "tenancy.presentation*",
                "tenancy.dependencies*",
            )
            .check("tenancy")
        )

    def test_domain_is_framework_agnostic(self):
        """Domain objects should not depend on web or database frameworks."""
        (
            archrule("tenancy_domain_no_frameworks")
            .match("tenancy.domain*")
            .should_not_import("fastapi*", "starlette*", "sqlalchemy*")
            .check("tenancy")
        )


class TestTenancyPortsLayer:
    """Tests for the tenancy ports layer."""

    def test_ports_do_not_import_implementations(self):
        """Ports define interfaces and must not know their adapters."""
        (
            archrule("tenancy_ports_no_adapters")
            .match("tenancy.ports*")
            .should_not_import(
                "tenancy.infrastructure*",
                "tenancy.application*",
                "sqlalchemy*",
            )
            .check("tenancy")
        )


class TestTenancyApplicationLayer:
    """Tests for the tenancy application layer."""

    def test_application_does_not_import_infrastructure(self):
        """Resolver, registry and cache depend on ports, not adapters."""
        (
            archrule("tenancy_application_no_infrastructure")
            .match("tenancy.application*")
            .should_not_import(
                "tenancy.infrastructure*",
                "tenancy.presentation*",
                "tenancy.dependencies*",
            )
            .check("tenancy")
        )

    def test_application_is_framework_agnostic(self):
        """The application layer does not depend on FastAPI or SQLAlchemy."""
        (
            archrule("tenancy_application_no_frameworks")
            .match("tenancy.application*")
            .should_not_import("fastapi*", "sqlalchemy*")
            .check("tenancy")
        )


class TestTenancyInfrastructureLayer:
    """Tests for the tenancy infrastructure layer."""

    def test_infrastructure_does_not_import_application(self):
        """Adapters implement ports without reaching into services."""
        (
            archrule("tenancy_infrastructure_no_application")
            .match("tenancy.infrastructure*")
            .should_not_import("tenancy.application*", "tenancy.presentation*")
            .check("tenancy")
        )


class TestSharedKernel:
    """Tests for the shared kernel."""

    def test_shared_kernel_does_not_import_bounded_contexts(self):
        """The shared kernel must not depend on any bounded context."""
        (
            archrule("shared_kernel_no_contexts")
            .match("shared_kernel*")
            .should_not_import("tenancy*")
            .check("shared_kernel")
        )

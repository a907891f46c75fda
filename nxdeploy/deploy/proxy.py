"""Proxy tier deployment: upstream pool, API block, optional site block."""
from typing import Optional

from nxdeploy.core.config import DeployerConfig, ProxySettings
from nxdeploy.core.logger import get_logger
from nxdeploy.deploy.base import DeploymentHandler
from nxdeploy.models.deployment import DeploymentOptions, DeploymentType
from nxdeploy.models.nginx import BodyKind, CertLocation, LocationBody, ServerBlockSpec
from nxdeploy.models.overlay import ConfigOverlay
from nxdeploy.nginx.layout import ConfigLayout, resolve_cert_location
from nxdeploy.nginx.writer import ConfigBlockWriter

logger = get_logger(__name__)


class ProxyDeployment(DeploymentHandler):
    """Writes the proxy configuration files, one after the other."""

    deployment_type = DeploymentType.PROXY

    def select_settings(self, config: DeployerConfig, overlay: Optional[ConfigOverlay]) -> ProxySettings:
        return config.proxy.with_overlay(overlay.proxy if overlay else None)

    def deploy(self, options: DeploymentOptions, settings: ProxySettings) -> None:
        """Write upstream.conf, then the API block, then the site block.

        Each write completes before the next starts since both server blocks
        point at the upstream name declared first. The site block is skipped
        when no site domain is configured.
        """
        settings.validate()
        output_root = options.paths.output_root
        layout = ConfigLayout.for_os(output_root, settings.os_name)

        writer = ConfigBlockWriter(self.sink, self.cert_location(settings, output_root))

        writer.write_upstream(settings.upstream, layout.upstream_dir)
        logger.info(f"✓ Upstream {settings.upstream.name} was written successfully")

        writer.write_server_block(self.api_block(settings), layout.sites_dir, settings.api_conf)
        logger.info("✓ API config was written successfully")

        if not settings.site_domain:
            logger.info("No site domain configured, skipping site config")
            return

        writer.write_server_block(self.site_block(settings), layout.sites_dir, settings.site_conf)
        logger.info("✓ Site config was written successfully")

    @staticmethod
    def cert_location(settings: ProxySettings, output_root: str) -> Optional[CertLocation]:
        """Resolve certificates only when some block actually uses TLS."""
        if not (settings.https_api or (settings.site_domain and settings.https_site)):
            return None
        return resolve_cert_location(
            output_root,
            custom_certs=settings.custom_certs,
            custom_certs_path=settings.custom_certs_path,
        )

    @staticmethod
    def api_block(settings: ProxySettings) -> ServerBlockSpec:
        return ServerBlockSpec(
            domain=settings.api_domain,
            body=LocationBody(kind=BodyKind.PROXY, upstream_name=settings.upstream.name),
            tls=settings.https_api,
            redirect_from_http=settings.http_api_redirect,
        )

    @staticmethod
    def site_block(settings: ProxySettings) -> ServerBlockSpec:
        return ServerBlockSpec(
            domain=settings.site_domain,
            body=LocationBody(kind=BodyKind.STATIC, root_path=settings.site_path),
            tls=settings.https_site,
            redirect_from_http=settings.http_site_redirect,
        )

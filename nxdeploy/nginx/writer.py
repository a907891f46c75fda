"""Render upstream pools and server blocks and hand them to an artifact sink."""
import os
from typing import Optional

from jinja2 import DictLoader, Environment, StrictUndefined, TemplateError

from nxdeploy.core.errors import ConfigurationError
from nxdeploy.core.logger import get_logger
from nxdeploy.core.sink import ArtifactSink
from nxdeploy.models.nginx import CertLocation, ServerBlockSpec, UpstreamSpec
from nxdeploy.nginx.templates import PROXY_HEADERS, STATIC_INDEX_FILES, TEMPLATES

logger = get_logger(__name__)

UPSTREAM_FILE = "upstream.conf"


class ConfigBlockWriter:
    """Turns upstream and server block specs into proxy configuration files.

    Every call renders and writes exactly one file; the writer keeps no state
    between calls, so rendering the same spec twice gives identical text.
    """

    def __init__(self, sink: ArtifactSink, cert_location: Optional[CertLocation] = None):
        """
        Args:
            sink: Destination for rendered files
            cert_location: Certificates referenced by HTTPS blocks
        """
        self.sink = sink
        self.cert_location = cert_location
        self.env = Environment(
            loader=DictLoader(TEMPLATES),
            autoescape=False,  # proxy configs are not HTML
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def render_upstream(self, spec: UpstreamSpec) -> str:
        """Render the pool, skipping members without a resolved host."""
        for member in spec.unresolved_members():
            logger.warning(
                f"Unable to find environment variable {member.binding}, "
                f"omitting member from upstream {spec.name}"
            )

        members = spec.resolved_members()
        if len(members) < spec.expected_count:
            logger.warning(
                f"Upstream {spec.name} has {len(members)} of {spec.expected_count} expected members"
            )

        return self._render("upstream.conf.j2", name=spec.name, members=members)

    def render_server_block(self, spec: ServerBlockSpec) -> str:
        """Render the server block(s) for one domain.

        With TLS and redirect on, a port 80 redirect block is followed by the
        HTTPS block. With TLS only, the HTTPS block stands alone. Without TLS
        a single plain block is emitted and the redirect flag is ignored.
        """
        if not spec.tls:
            if spec.redirect_from_http:
                logger.warning(
                    f"HTTP redirect requested for {spec.domain} without TLS; "
                    "writing a plain HTTP block instead"
                )
            return self._render_server(spec, listen=spec.listen_port, cert=None)

        cert = self.cert_location
        if cert is None:
            raise ConfigurationError(f"TLS is enabled for {spec.domain} but no certificate location is configured")

        blocks = []
        if spec.emits_redirect:
            blocks.append(
                self._render(
                    "redirect.conf.j2",
                    listen=spec.listen_port,
                    domain=spec.domain,
                    client_max_body_size=spec.client_max_body_size,
                )
            )
        blocks.append(self._render_server(spec, listen=spec.tls_listen_port, cert=cert))
        return "".join(blocks)

    def write_upstream(self, spec: UpstreamSpec, directory: str) -> str:
        """Write ``upstream.conf`` into ``directory`` and return its path."""
        path = os.path.join(directory, UPSTREAM_FILE)
        logger.info(f"Writing {UPSTREAM_FILE} in {directory}")
        self.sink.write(path, self.render_upstream(spec))
        return path

    def write_server_block(self, spec: ServerBlockSpec, directory: str, file_name: str) -> str:
        """Write the server block(s) for ``spec`` to ``directory/file_name``."""
        path = os.path.join(directory, file_name)
        logger.info(f"Writing {file_name} for {spec.domain} in {directory}")
        self.sink.write(path, self.render_server_block(spec))
        return path

    def _render_server(self, spec: ServerBlockSpec, listen: str, cert: Optional[CertLocation]) -> str:
        return self._render(
            "server.conf.j2",
            listen=listen,
            domain=spec.domain,
            client_max_body_size=spec.client_max_body_size,
            cert=cert,
            body=spec.body,
            proxy_headers=PROXY_HEADERS,
            index_files=STATIC_INDEX_FILES,
        )

    def _render(self, template_name: str, **context) -> str:
        try:
            return self.env.get_template(template_name).render(**context)
        except TemplateError as e:
            logger.error(f"Failed to render {template_name}: {e}")
            raise

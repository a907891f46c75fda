"""Jinja2 sources for the generated proxy configuration."""

PROXY_HEADERS = (
    ("X-Forwarded-Proto", "$scheme"),
    ("X-Forwarded-For", "$remote_addr"),
    ("Host", "$http_host"),
    ("X-NginX-Proxy", "true"),
    ("Connection", '""'),
)

STATIC_INDEX_FILES = ("index.html", "index.htm")

UPSTREAM_TEMPLATE = """\
upstream {{ name }} {
{% for member in members %}
  server {{ member.host }}:{{ member.port }};
{% endfor %}
}
"""

REDIRECT_TEMPLATE = """\
server {
  listen       {{ listen }};
  server_name  {{ domain }};
  client_max_body_size {{ client_max_body_size }};
  rewrite ^/(.*) https://{{ domain }}/$1 permanent;
}
"""

SERVER_TEMPLATE = """\
server {
  listen       {{ listen }};
  server_name  {{ domain }};
  client_max_body_size {{ client_max_body_size }};
{% if cert %}
  ssl_certificate         {{ cert.cert_path }};
  ssl_certificate_key     {{ cert.key_path }};
  include {{ cert.params_path }};
{% endif %}
{% include "location_" ~ body.kind.value ~ ".conf.j2" %}
}
"""

PROXY_LOCATION_TEMPLATE = """\
  location / {
    proxy_pass http://{{ body.upstream_name }};
{% for header, value in proxy_headers %}
    proxy_set_header {{ header }} {{ value }};
{% endfor %}
  }
"""

STATIC_LOCATION_TEMPLATE = """\
  location / {
    root  {{ body.root_path }};
    sendfile       off;
    index  {{ index_files | join(" ") }};
  }
"""

TEMPLATES = {
    "upstream.conf.j2": UPSTREAM_TEMPLATE,
    "redirect.conf.j2": REDIRECT_TEMPLATE,
    "server.conf.j2": SERVER_TEMPLATE,
    "location_proxy.conf.j2": PROXY_LOCATION_TEMPLATE,
    "location_static.conf.j2": STATIC_LOCATION_TEMPLATE,
}

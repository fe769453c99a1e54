"""
Dockerfile generator — the static container-build file for the application.

The image is the same for every configuration: PHP with Apache, the
PDO drivers for both server databases, and mod_rewrite.
"""

from __future__ import annotations

from appstrap.core.models.template import GeneratedFile

_APP_DOCKERFILE = """\
# ── Runtime ─────────────────────────────────────────────────────
FROM php:8.2-apache

# PDO drivers for MySQL and PostgreSQL
RUN apt-get update \\
    && apt-get install -y --no-install-recommends libpq-dev \\
    && docker-php-ext-install mysqli pdo pdo_mysql pdo_pgsql \\
    && rm -rf /var/lib/apt/lists/*

RUN a2enmod rewrite

# Silence the "could not determine ServerName" warning
RUN echo "ServerName localhost" >> /etc/apache2/apache2.conf

COPY . /var/www/html/

RUN chown -R www-data:www-data /var/www/html/

EXPOSE 80
"""


def generate_dockerfile(*, output_path: str = "Dockerfile") -> GeneratedFile:
    """Return the application Dockerfile."""
    return GeneratedFile(
        path=output_path,
        content=_APP_DOCKERFILE,
        reason="Container build file for the application service",
    )

#!/usr/bin/env python3
"""
Worker des backups automatiques Casa de Cambios.

Ce worker charge les configurations de backup_configurations et
execute les backups selon leur cadence (daily/weekly/monthly),
en heure locale (BUSINESS_TIMEZONE).

Deploiement:
------------
Deployer comme service "worker" separe du dashboard.
- Command: python scheduler.py
- Variables: DATABASE_URL, BACKUP_DIR

Variables d'environnement:
--------------------------
- DATABASE_URL : URL de la base operationnelle (obligatoire)
- BACKUP_DIR : Repertoire des fichiers de backup
- BACKUP_RETENTION_DAYS : Retention par defaut (90)
- BACKUP_RELOAD_INTERVAL_MINUTES : Rechargement des configurations (60)
- LOG_JSON / LOG_LEVEL : Format et niveau des logs
- PORT : Port du healthcheck (defaut: HEALTH_PORT)

Healthcheck:
------------
GET /health retourne l'etat du scheduler et des jobs planifies.

Arret propre:
-------------
Ctrl+C ou SIGTERM arrete le scheduler (attend les backups en cours).
"""
import json
import os
import signal
import sys
import time
from http.server import BaseHTTPRequestHandler, HTTPServer
from threading import Event, Thread

from cambio_backup.infrastructure.backup.config import get_backup_settings
from cambio_backup.infrastructure.container import Container
from cambio_backup.infrastructure.logging import configure_logging, get_logger

logger = get_logger("scheduler")


# ============================================================================
# HEALTH CHECK SERVER
# ============================================================================

def make_health_handler(container: Container):
    """Construit le handler HTTP du healthcheck pour un container."""

    class HealthHandler(BaseHTTPRequestHandler):
        """Handler HTTP simple pour les healthchecks."""

        def do_GET(self):
            if self.path not in ("/health", "/_stcore/health"):
                self.send_response(404)
                self.end_headers()
                return

            scheduler_status = container.scheduler.status()
            healthy = scheduler_status["running"]
            body = json.dumps({
                "status": "healthy" if healthy else "unhealthy",
                "service": "backup-scheduler",
                "scheduler": scheduler_status,
            })

            self.send_response(200 if healthy else 503)
            self.send_header("Content-type", "application/json")
            self.end_headers()
            self.wfile.write(body.encode("utf-8"))

        def log_message(self, format, *args):
            # Silence les logs HTTP
            pass

    return HealthHandler


def start_health_server(container: Container, port: int) -> HTTPServer:
    """Demarre le serveur de healthcheck en background."""
    server = HTTPServer(("0.0.0.0", port), make_health_handler(container))
    thread = Thread(target=server.serve_forever, daemon=True)
    thread.start()
    logger.info("health_server_started", port=port)
    return server


def main():
    """Point d'entree principal du worker"""
    settings = get_backup_settings()
    configure_logging(json_logs=settings.log_json, log_level=settings.log_level)

    logger.info(
        "backup_worker_starting",
        timezone=settings.business_timezone,
        backup_dir=str(settings.backup_path),
    )

    container = Container.create(settings)
    try:
        container.startup()
    except Exception as e:
        logger.error("backup_worker_startup_failed", error=str(e))
        sys.exit(1)

    health_port = int(os.getenv("PORT", settings.health_port))
    server = start_health_server(container, health_port)

    stop_event = Event()
    signal.signal(signal.SIGTERM, lambda *_: stop_event.set())

    logger.info("backup_worker_started", **container.scheduler.status())

    try:
        while not stop_event.is_set():
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        logger.info("backup_worker_stopping")
        server.shutdown()
        container.shutdown()


if __name__ == "__main__":
    main()

"""
Voice Agent Demo Builder - Data Service
Data persistence layer - JSON file storage for clients and demo links
"""
import os
import json
import logging
import shutil
from typing import Dict, List, Optional
from pathlib import Path

from demo_builder.models.client import Client, ClientStatus
from demo_builder.models.demo_link import DemoLink
from demo_builder.utils import utcnow

logger = logging.getLogger(__name__)


class DataService:
    """
    Data persistence service

    One JSON file per record, in a directory per collection. Writes replace
    the whole record; concurrent writers are last-write-wins.
    """

    COLLECTIONS = ('clients', 'demo_links')

    def __init__(self, data_dir: str = None):
        self.data_dir = Path(data_dir or os.environ.get('DATA_DIR', './data'))
        self._ensure_directories()

    def _ensure_directories(self):
        """Create data directories if they don't exist"""
        for dir_name in self.COLLECTIONS:
            (self.data_dir / dir_name).mkdir(parents=True, exist_ok=True)

    def _load_json(self, filepath: Path) -> Optional[Dict]:
        """Load JSON file, skipping unreadable records"""
        if not filepath.exists():
            return None
        try:
            with open(filepath, 'r') as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Skipping unreadable record {filepath}: {e}")
            return None

    def _save_json(self, filepath: Path, data: Dict):
        """Save JSON file"""
        with open(filepath, 'w') as f:
            json.dump(data, f, indent=2, default=str)

    def _iter_records(self, collection: str):
        for filepath in sorted((self.data_dir / collection).glob('*.json')):
            data = self._load_json(filepath)
            if data:
                yield data

    # ==================== CLIENT METHODS ====================

    def get_client(self, client_id: str) -> Optional[Client]:
        """Get client by ID"""
        filepath = self.data_dir / 'clients' / f'{client_id}.json'
        data = self._load_json(filepath)

        if data:
            return Client.from_dict(data)
        return None

    def save_client(self, client: Client) -> Client:
        """Save client"""
        filepath = self.data_dir / 'clients' / f'{client.id}.json'
        self._save_json(filepath, client.to_dict())
        return client

    def get_all_clients(self, status: ClientStatus = None) -> List[Client]:
        """Get all clients, newest first"""
        clients = []
        for data in self._iter_records('clients'):
            try:
                client = Client.from_dict(data)
            except ValueError as e:
                logger.warning(f"Skipping invalid client record {data.get('id')}: {e}")
                continue
            if status and client.status != status:
                continue
            clients.append(client)

        clients.sort(key=lambda c: c.created_at, reverse=True)
        return clients

    def delete_client(self, client_id: str) -> bool:
        """Delete client file"""
        filepath = self.data_dir / 'clients' / f'{client_id}.json'
        if filepath.exists():
            filepath.unlink()
            return True
        return False

    # ==================== DEMO LINK METHODS ====================

    def get_demo_link(self, link_id: str) -> Optional[DemoLink]:
        """Get demo link by ID"""
        filepath = self.data_dir / 'demo_links' / f'{link_id}.json'
        data = self._load_json(filepath)

        if data:
            return DemoLink.from_dict(data)
        return None

    def get_demo_link_by_slug(self, slug: str) -> Optional[DemoLink]:
        """Get demo link by its public slug"""
        for data in self._iter_records('demo_links'):
            if data.get('slug') == slug:
                return DemoLink.from_dict(data)
        return None

    def save_demo_link(self, link: DemoLink) -> DemoLink:
        """Save demo link"""
        filepath = self.data_dir / 'demo_links' / f'{link.id}.json'
        self._save_json(filepath, link.to_dict())
        return link

    def get_demo_links_by_client(self, client_id: str) -> List[DemoLink]:
        """Get all demo links for a client, oldest first"""
        links = [
            DemoLink.from_dict(data)
            for data in self._iter_records('demo_links')
            if data.get('client_id') == client_id
        ]
        links.sort(key=lambda link: link.created_at)
        return links

    def get_all_slugs(self) -> set:
        return {data.get('slug') for data in self._iter_records('demo_links')}

    def delete_demo_link(self, link_id: str) -> bool:
        """Delete demo link file"""
        filepath = self.data_dir / 'demo_links' / f'{link_id}.json'
        if filepath.exists():
            filepath.unlink()
            return True
        return False

    # ==================== UTILITY METHODS ====================

    def export_clients_json(self) -> str:
        """All clients as a JSON array"""
        return json.dumps([c.to_dict() for c in self.get_all_clients()], indent=2)

    def import_clients_json(self, json_string: str) -> bool:
        """
        Replace stored clients with the ones in a JSON array.

        Returns False without touching the store when the payload is not a
        JSON array of valid client records.
        """
        try:
            records = json.loads(json_string)
        except ValueError:
            return False
        if not isinstance(records, list):
            return False

        try:
            clients = [Client.from_dict(record) for record in records]
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Rejected client import: {e}")
            return False

        for filepath in (self.data_dir / 'clients').glob('*.json'):
            filepath.unlink()
        for client in clients:
            self.save_client(client)

        logger.info(f"Imported {len(clients)} clients")
        return True

    def backup_all(self, backup_path: str = None) -> str:
        """Create backup of all data"""
        backup_path = backup_path or f'./backups/backup_{utcnow().strftime("%Y%m%d_%H%M%S")}'
        shutil.copytree(self.data_dir, backup_path)
        return backup_path

    def get_stats(self) -> Dict[str, int]:
        """Get data statistics"""
        return {
            name: len(list((self.data_dir / name).glob('*.json')))
            for name in self.COLLECTIONS
        }

# pubchem_client.py
# PubChem PUG REST / PUG-View access: identifier -> CID resolution,
# scalar property lookup and full record retrieval

import logging
from urllib.parse import quote

import requests

from config import settings
from errors import MalformedUpstreamDataError, UpstreamTransportError, UpstreamUnavailableError
from identifier_classifier import CID, FORMULA, INCHI, INCHIKEY, NAME
from models import CompoundProperties, parse_sections

logger = logging.getLogger(__name__)

PROPERTY_NAMES = ["MolecularWeight", "IUPACName", "InChI", "MolecularFormula"]


def _is_json(response):
    content_type = response.headers.get("Content-Type") or ""
    return "application/json" in content_type


def _first_cid(payload):
    """First CID of an ``IdentifierList`` payload, if it is a positive int"""
    if not isinstance(payload, dict):
        return None
    identifier_list = payload.get("IdentifierList")
    if not isinstance(identifier_list, dict):
        return None
    cids = identifier_list.get("CID")
    if not isinstance(cids, list) or not cids:
        return None
    cid = cids[0]
    if isinstance(cid, bool) or not isinstance(cid, int) or cid <= 0:
        return None
    return cid


class PubChemClient:
    """
    Thin client over the PubChem endpoints the risk assessment needs.
    Holds no per-request state, so one instance can serve every request.
    """

    def __init__(self, rest_url=None, view_url=None, compound_url=None, timeout=None):
        self.rest_url = (rest_url or settings.pubchem_rest_url).rstrip("/")
        self.view_url = (view_url or settings.pubchem_view_url).rstrip("/")
        self.compound_url = (compound_url or settings.pubchem_compound_url).rstrip("/")
        self.timeout = timeout or settings.request_timeout
        self.headers = {
            "User-Agent": "ChemLens/1.0 (environmental-risk lookup)",
            "Accept": "application/json",
        }

    def record_url(self, cid):
        return f"{self.compound_url}/{cid}"

    # ===== CID RESOLUTION =====

    def get_cid(self, identifier):
        """
        Resolve a classified identifier to a PubChem CID.
        Returns None whenever the identifier cannot be resolved, including
        network and parse failures.
        """
        raw_query = identifier.raw
        query_type = identifier.kind
        logger.info(f"[Resolver] Fetching CID for query \"{raw_query}\" (type: {query_type})")

        if query_type == CID:
            try:
                cid = int(raw_query)
            except ValueError:
                cid = 0
            if cid > 0:
                logger.info(f"[Resolver] Valid CID provided: {cid}")
                return cid
            logger.error(f"[Resolver] Invalid CID format: \"{raw_query}\"")
            return None

        if query_type == INCHI:
            # InChI strings carry '/' and '=' so they go in a form body
            url = f"{self.rest_url}/compound/inchi/cids/JSON"
            return self._fetch_cid(url, raw_query, query_type, method="POST", data={"inchi": raw_query})

        encoded = quote(raw_query, safe="")
        if query_type == FORMULA:
            url = f"{self.rest_url}/compound/formula/{encoded}/cids/JSON"
        elif query_type == INCHIKEY:
            url = f"{self.rest_url}/compound/inchikey/{encoded}/cids/JSON"
        else:
            url = f"{self.rest_url}/compound/name/{encoded}/cids/JSON"
            return self._fetch_cid(url, raw_query, NAME, params={"name_type": "complete"})

        return self._fetch_cid(url, raw_query, query_type)

    def _fetch_cid(self, url, raw_query, query_type, method="GET", params=None, data=None):
        try:
            if method == "POST":
                response = requests.post(url, data=data, headers=self.headers, timeout=self.timeout)
            else:
                response = requests.get(url, params=params, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"[Resolver] Network error during CID lookup for {query_type} \"{raw_query}\": {e}")
            return None

        if not response.ok:
            logger.warning(
                f"[Resolver] PubChem CID fetch failed for {query_type} \"{raw_query}\". "
                f"Status: {response.status_code}. URL: {url}"
            )
            return self._formula_fallback(raw_query, query_type)

        if not _is_json(response):
            logger.warning(
                f"[Resolver] CID lookup for {query_type} \"{raw_query}\" did not return JSON. "
                f"Content-Type: {response.headers.get('Content-Type')}"
            )
            return None

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"[Resolver] Could not parse CID response for {query_type} \"{raw_query}\": {e}")
            return None

        cid = _first_cid(payload)
        if cid is None:
            logger.warning(f"[Resolver] No CID found in PubChem response for {query_type} \"{raw_query}\"")
            return self._formula_fallback(raw_query, query_type)

        logger.info(f"[Resolver] Found CID {cid} via {query_type} search")
        return cid

    def _formula_fallback(self, raw_query, query_type):
        if query_type != FORMULA:
            return None
        logger.info(f"[Resolver] Formula search failed, attempting name search for \"{raw_query}\"")
        encoded = quote(raw_query, safe="")
        url = f"{self.rest_url}/compound/name/{encoded}/cids/JSON"
        return self._fetch_cid(url, raw_query, NAME, params={"name_type": "complete"})

    # ===== PROPERTIES =====

    def get_properties(self, cid):
        """
        Fetch the scalar properties of a compound.
        Bad statuses and unreadable bodies give empty properties; only a
        transport failure raises (UpstreamTransportError).
        """
        url = f"{self.rest_url}/compound/cid/{cid}/property/{','.join(PROPERTY_NAMES)}/JSON"
        logger.info(f"[Properties] Fetching properties from URL: {url}")

        try:
            response = requests.get(url, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"[Properties] Network error fetching properties for CID {cid}: {e}")
            raise UpstreamTransportError(cid, e) from e

        if not response.ok:
            logger.warning(f"[Properties] PubChem property fetch failed. Status: {response.status_code}")
            return CompoundProperties()

        if not _is_json(response):
            logger.warning(f"[Properties] Property fetch for CID {cid} did not return JSON")
            return CompoundProperties()

        try:
            payload = response.json()
        except ValueError as e:
            logger.warning(f"[Properties] Could not parse property JSON for CID {cid}: {e}")
            return CompoundProperties()

        try:
            properties = payload["PropertyTable"]["Properties"][0]
        except (KeyError, IndexError, TypeError):
            properties = None

        if not isinstance(properties, dict) or properties.get("CID") != cid:
            logger.warning(f"[Properties] Properties missing or unexpected for CID {cid}")
            return CompoundProperties()

        result = CompoundProperties.model_validate(properties)
        logger.info(
            f"[Properties] CID {cid}: MW={result.molecular_weight}, IUPAC={result.iupac_name}, "
            f"Formula={result.molecular_formula}, InChI={'Yes' if result.inchi else 'No'}"
        )
        return result

    # ===== FULL RECORD =====

    def get_record_sections(self, cid):
        """
        Fetch the PUG-View record and return its typed top-level sections.
        Raises UpstreamUnavailableError when the record cannot be fetched
        and MalformedUpstreamDataError when the body is not valid JSON.
        """
        url = f"{self.view_url}/data/compound/{cid}/JSON"
        logger.info(f"[Record] Fetching full PUG View data for CID: {cid}")

        try:
            response = requests.get(url, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"[Record] Network error fetching PUG View data for CID {cid}: {e}")
            raise UpstreamUnavailableError("Failed to retrieve essential data from PubChem.", details=str(e)) from e

        if not response.ok:
            logger.error(f"[Record] Failed to fetch PUG View data for CID {cid}: {response.status_code}")
            raise UpstreamUnavailableError(
                "Failed to retrieve essential data from PubChem.",
                details=f"PUG View status: {response.status_code}",
            )

        if not _is_json(response):
            logger.error(f"[Record] PUG View response for CID {cid} did not return JSON")
            raise UpstreamUnavailableError(
                "Failed to retrieve essential data from PubChem.",
                details=f"PUG View content type: {response.headers.get('Content-Type')}",
            )

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"[Record] Failed to parse JSON from PUG View response for CID {cid}: {e}")
            raise MalformedUpstreamDataError(
                "Failed to retrieve or parse essential data from PubChem.",
                details=f"PUG View JSON parse error: {e}",
            ) from e

        record = payload.get("Record") if isinstance(payload, dict) else None
        raw_sections = record.get("Section") if isinstance(record, dict) else None
        sections = parse_sections(raw_sections)
        logger.info(f"[Record] Parsed {len(sections)} top-level sections for CID {cid}")
        return sections

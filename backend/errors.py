# errors.py
# Error taxonomy for the environmental risk lookup.
# Each error knows the HTTP status it maps to at the API boundary.


class ChemLensError(Exception):
    """Base class for errors surfaced to API clients"""
    status_code = 500

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        payload = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class CompoundNotFoundError(ChemLensError):
    """The identifier did not resolve to a PubChem CID"""
    status_code = 404

    def __init__(self, query, query_type):
        self.query = query
        self.query_type = query_type
        super().__init__(self._build_message(query, query_type))

    @staticmethod
    def _build_message(query, query_type):
        if query_type == "cid":
            return f'CID "{query}" not found or invalid.'
        if query_type == "formula":
            return f'No compound found for formula "{query}". Check formatting or try the name.'
        if query_type == "name":
            return f'Compound name "{query}" not found. Check spelling or try a synonym/CID/formula.'
        if query_type == "inchi":
            return f'InChI string "{query}" did not resolve to a CID. Check formatting or try another identifier.'
        return f'Could not find a PubChem Compound ID for the {query_type} query: "{query}".'


class UpstreamUnavailableError(ChemLensError):
    """Neither PubChem data source produced usable data"""
    status_code = 503


class UpstreamTransportError(ChemLensError):
    """Network-level failure on a call the request cannot do without"""
    status_code = 500

    def __init__(self, cid, cause):
        self.cid = cid
        self.cause = cause
        super().__init__(f"Failed to fetch properties for CID {cid}: {cause}", details=str(cause))


class MalformedUpstreamDataError(ChemLensError):
    """An essential PubChem response could not be parsed"""
    status_code = 500

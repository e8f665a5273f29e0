# xml-ingestor/src/xml_ingestor/__init__.py
__version__ = "0.1.0"

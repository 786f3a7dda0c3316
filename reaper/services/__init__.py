# Services module - CI provider integrations
from .transport import ProviderTransport, appveyor_transport, travis_transport
from .travis import TravisProber
from .appveyor import AppVeyorProber

__all__ = ["ProviderTransport", "appveyor_transport", "travis_transport", "TravisProber", "AppVeyorProber"]

"""C-family quoted includes and Swift module imports."""

from __future__ import annotations

import re

from ..models import Language
from .base import FileIndex, RegexStrategy, join_relative, normalize

# Angle-bracket system includes are deliberately not matched.
_INCLUDE = re.compile(r'^[ \t]*#[ \t]*include[ \t]*"([^"\n]+)"', re.MULTILINE)

_SWIFT_IMPORT = re.compile(
    r"^[ \t]*(?:@testable[ \t]+)?import[ \t]+"
    r"(?:(?:typealias|struct|class|enum|protocol|let|var|func)[ \t]+)?([\w.]+)",
    re.MULTILINE,
)
_SWIFT_EXTERNAL = re.compile(
    r"^(?:Foundation|UIKit|SwiftUI|Combine|XCTest|AppKit|CoreData|CoreGraphics|"
    r"CoreLocation|CoreML|MapKit|AVFoundation|AVKit|Photos|PhotosUI|WebKit|"
    r"StoreKit|UserNotifications|Security|Network|os|Darwin|Dispatch|"
    r"ObjectiveC|Swift|_Concurrency|Observation|SwiftData|Charts|GameKit|"
    r"SpriteKit|SceneKit|ARKit|RealityKit|Vision|CryptoKit|LocalAuthentication|"
    r"Alamofire|RxSwift|RxCocoa|SnapKit|Kingfisher|Firebase\w*)(?:\.|$)"
)


class CFamilyStrategy(RegexStrategy):
    language = Language.c_family
    patterns = (_INCLUDE,)

    def resolve(self, specifier: str, importer_path: str, files: FileIndex) -> str | None:
        hit = files.first([join_relative(importer_path, specifier) or "", normalize(specifier) or ""])
        if hit:
            return hit
        # Include roots such as "include/" or "src/".
        cleaned = normalize(specifier)
        return files.first_with_suffix(cleaned) if cleaned else None


class SwiftStrategy(RegexStrategy):
    language = Language.swift
    patterns = (_SWIFT_IMPORT,)
    EXTERNAL = _SWIFT_EXTERNAL

    def resolve(self, specifier: str, importer_path: str, files: FileIndex) -> str | None:
        # A Swift module is a target directory (e.g. Sources/<Module>/).
        module = specifier.split(".", 1)[0]
        for directory in files.directories_with_suffix(module):
            sources = files.files_in(directory, (".swift",))
            if sources:
                return sources[0]
        return None

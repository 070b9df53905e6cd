# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Runtime helpers the lowering passes may request.

Each helper is printed verbatim at the top of the file (after any prologue
directives) once at least one pass has called
`TransformationContext.request_helper(name)`. Texts are indented with four
spaces like the rest of the printer output.
"""

from __future__ import annotations

from typing import Dict, Iterable, List

EXTENDS = """\
var __extends = (this && this.__extends) || (function () {
    var extendStatics = function (d, b) {
        extendStatics = Object.setPrototypeOf ||
            ({ __proto__: [] } instanceof Array && function (d, b) { d.__proto__ = b; }) ||
            function (d, b) { for (var p in b) if (Object.prototype.hasOwnProperty.call(b, p)) d[p] = b[p]; };
        return extendStatics(d, b);
    };
    return function (d, b) {
        extendStatics(d, b);
        function __() { this.constructor = d; }
        d.prototype = b === null ? Object.create(b) : (__.prototype = b.prototype, new __());
    };
})();"""

ASSIGN = """\
var __assign = (this && this.__assign) || function () {
    __assign = Object.assign || function(t) {
        for (var s, i = 1, n = arguments.length; i < n; i++) {
            s = arguments[i];
            for (var p in s) if (Object.prototype.hasOwnProperty.call(s, p))
                t[p] = s[p];
        }
        return t;
    };
    return __assign.apply(this, arguments);
};"""

REST = """\
var __rest = (this && this.__rest) || function (s, e) {
    var t = {};
    for (var p in s) if (Object.prototype.hasOwnProperty.call(s, p) && e.indexOf(p) < 0)
        t[p] = s[p];
    if (s != null && typeof Object.getOwnPropertySymbols === "function")
        for (var i = 0, p = Object.getOwnPropertySymbols(s); i < p.length; i++) {
            if (e.indexOf(p[i]) < 0 && Object.prototype.propertyIsEnumerable.call(s, p[i]))
                t[p[i]] = s[p[i]];
        }
    return t;
};"""

EXPORT_STAR = """\
function __export(m) {
    for (var p in m) if (!exports.hasOwnProperty(p)) exports[p] = m[p];
}"""

# Print order, independent of request order.
HELPERS: Dict[str, str] = {
	"__extends": EXTENDS,
	"__assign": ASSIGN,
	"__rest": REST,
	"__export": EXPORT_STAR,
}


def helper_texts(requested: Iterable[str]) -> List[str]:
	wanted = set(requested)
	unknown = wanted.difference(HELPERS)
	if unknown:
		raise KeyError(f"unknown emit helper(s): {', '.join(sorted(unknown))}")
	return [text for name, text in HELPERS.items() if name in wanted]


__all__ = ["HELPERS", "helper_texts"]

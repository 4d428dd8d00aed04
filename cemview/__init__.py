"""Inspect, render and query custom elements manifests."""

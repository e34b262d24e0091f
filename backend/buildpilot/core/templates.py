# buildpilot/core/templates.py
from __future__ import annotations

from typing import Any, Dict, List

PROJECT_TYPES: Dict[str, Dict[str, Any]] = {
    "react-vite": {
        "name": "React + Vite",
        "description": "Modern React application with Vite build tool",
        "features": ["React 18", "Vite", "TypeScript", "Hot Reload"],
        "coming_soon": False,
    },
    "nextjs": {
        "name": "Next.js",
        "description": "Full-stack React framework with SSR/SSG",
        "features": ["Next.js 15", "App Router", "SSR/SSG", "API Routes"],
        "coming_soon": False,
    },
    "tailwind": {
        "name": "Tailwind CSS",
        "description": "Utility-first CSS framework for rapid UI development",
        "features": ["Tailwind CSS", "Responsive Design", "Customizable", "JIT Compilation"],
        "coming_soon": False,
    },
    "react-native": {
        "name": "React Native",
        "description": "Cross-platform mobile app development",
        "features": ["iOS & Android", "Native Performance", "Hot Reload", "Expo"],
        "coming_soon": True,
    },
}

TEMPLATES: Dict[str, Dict[str, str]] = {
    "blank": {"name": "Blank Project", "description": "Start from scratch with a clean slate"},
    "landing-page": {"name": "Landing Page", "description": "Modern landing page with hero section"},
    "dashboard": {"name": "Admin Dashboard", "description": "Analytics dashboard with charts and tables"},
    "ecommerce": {"name": "E-commerce Store", "description": "Online store with cart and checkout"},
    "blog": {"name": "Blog Platform", "description": "Content-focused blog with markdown support"},
    "portfolio": {"name": "Portfolio Site", "description": "Showcase your work and skills"},
}

STARTER_CODE = """import React from 'react';

export default function App() {
  return (
    <div className="min-h-screen bg-gray-50 flex items-center justify-center">
      <div className="text-center">
        <h1 className="text-4xl font-bold text-gray-900 mb-4">
          Welcome to {project_name}
        </h1>
        <p className="text-lg text-gray-600 mb-8">
          Start building your amazing application with AI assistance.
        </p>
        <div className="space-x-4">
          <button className="px-6 py-3 bg-blue-600 text-white rounded-lg hover:bg-blue-700 transition-colors">
            Get Started
          </button>
          <button className="px-6 py-3 bg-gray-200 text-gray-800 rounded-lg hover:bg-gray-300 transition-colors">
            Learn More
          </button>
        </div>
      </div>
    </div>
  );
}"""

def generate_initial_code(project_type: str, template: str, project_name: str) -> str:
    # Every type/template currently starts from the same App component.
    return STARTER_CODE.replace("{project_name}", project_name or "Your Project")

def _file(path: str) -> Dict[str, Any]:
    return {"name": path.rsplit("/", 1)[-1], "type": "file", "path": path}

def _dir(path: str, children: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"name": path.rsplit("/", 1)[-1], "type": "directory", "path": path, "children": children}

def file_tree(project_type: str) -> List[Dict[str, Any]]:
    if project_type == "nextjs":
        return [
            _dir("app", [_file("app/page.tsx"), _file("app/layout.tsx"), _file("app/globals.css")]),
            _file("package.json"),
            _file("next.config.js"),
            _file("README.md"),
        ]
    return [
        _dir("src", [_file("src/App.tsx"), _file("src/index.css"), _file("src/main.tsx")]),
        _file("package.json"),
        _file("README.md"),
    ]

def main_file_path(project_type: str) -> str:
    return "app/page.tsx" if project_type == "nextjs" else "src/App.tsx"

def render_code_tree(nodes: List[Dict[str, Any]], depth: int = 0) -> str:
    lines: List[str] = []
    for node in nodes:
        suffix = "/" if node["type"] == "directory" else ""
        lines.append(f"{'  ' * depth}{node['name']}{suffix}")
        if node.get("children"):
            lines.append(render_code_tree(node["children"], depth + 1))
    return "\n".join(lines)

# buildpilot/core/snippets.py
from __future__ import annotations

import textwrap

# Closing tags of the inner container and the page root in the starter App.
CONTAINER_CLOSE_ANCHOR = "</div>\n    </div>"
APP_SIGNATURE_ANCHOR = "export default function App() {"
ROOT_DIV_ANCHOR = '<div className="min-h-screen bg-gray-50 flex items-center justify-center">'
HEADING_ANCHOR = '<h1 className="text-4xl font-bold text-gray-900 mb-4">'
REACT_IMPORT_ANCHOR = "import React from 'react';"

# Replacements for CONTAINER_CLOSE_ANCHOR re-emit both closing tags.
BUTTON_SNIPPET = "\n".join(
    [
        '        <button className="px-6 py-3 bg-blue-600 text-white rounded-lg hover:bg-blue-700 transition-colors mt-4">',
        "          Get Started",
        "        </button>",
        "      </div>",
        "    </div>",
    ]
)

_INPUT_CLASS = (
    "w-full px-4 py-2 border border-gray-300 rounded-lg "
    "focus:outline-none focus:ring-2 focus:ring-blue-500"
)

FORM_SNIPPET = "\n".join(
    [
        '        <form className="mt-6 space-y-4">',
        "          <div>",
        "            <input",
        '              type="text"',
        '              placeholder="Your Name"',
        f'              className="{_INPUT_CLASS}"',
        "            />",
        "          </div>",
        "          <div>",
        "            <input",
        '              type="email"',
        '              placeholder="Your Email"',
        f'              className="{_INPUT_CLASS}"',
        "            />",
        "          </div>",
        "          <div>",
        "            <textarea",
        '              placeholder="Your Message"',
        "              rows={4}",
        f'              className="{_INPUT_CLASS}"',
        "            />",
        "          </div>",
        "          <button",
        '            type="submit"',
        '            className="w-full px-6 py-3 bg-blue-600 text-white rounded-lg hover:bg-blue-700 transition-colors"',
        "          >",
        "            Send Message",
        "          </button>",
        "        </form>",
        "      </div>",
        "    </div>",
    ]
)

DARK_MODE_STATE_SNIPPET = textwrap.dedent(
    """\
    export default function App() {
      const [darkMode, setDarkMode] = useState(false);

      const toggleDarkMode = () => {
        setDarkMode(!darkMode);
      };"""
)

DARK_MODE_ROOT_SNIPPET = textwrap.dedent(
    """\
    <div className={`min-h-screen ${darkMode ? 'bg-gray-900' : 'bg-gray-50'} flex items-center justify-center`}>
          <button
            onClick={toggleDarkMode}
            className="absolute top-4 right-4 px-4 py-2 bg-gray-200 dark:bg-gray-700 rounded-lg"
          >
            {darkMode ? '☀️' : '🌙'}
          </button>"""
)

DARK_MODE_HEADING_SNIPPET = (
    "<h1 className={`text-4xl font-bold ${darkMode ? 'text-white' : 'text-gray-900'} mb-4`}>"
)

REACT_WITH_STATE_IMPORT = "import React, { useState } from 'react';"

BUTTON_REPLY = (
    "I've added a button component to your application. "
    "The button includes hover effects and is fully responsive."
)

FORM_REPLY = (
    "I've created a contact form with proper validation and styling. "
    "The form includes name, email, and message fields."
)

DARK_MODE_REPLY = (
    "I've implemented a dark mode toggle for your application. "
    "Users can now switch between light and dark themes."
)

FALLBACK_REPLY = (
    "I understand you want to modify your application. "
    "Could you be more specific about what you'd like to add or change? "
    "For example, you could ask me to 'add a button', 'create a form', or 'implement dark mode'."
)

WELCOME_TEMPLATE = (
    "Welcome to {project_name}! I'm your AI assistant. "
    "Describe what you want to build, and I'll help you create it."
)

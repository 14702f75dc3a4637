#!/usr/bin/env python3
"""
Main entry point for the EasyHR Tools ATS back-end
This is a lightweight Flask app that provides:
- JSON endpoints behind the candidate, job and pipeline dashboards
- Invitation links and public application submission
- A proxy to the workflow engine for AI screening, email and interview scheduling
"""

import os
import threading

from app import create_app

app = create_app()

if __name__ == '__main__':
    from scheduler import start_background_services

    bg_thread = threading.Thread(target=start_background_services, args=(app,), daemon=True)
    bg_thread.start()

    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', '5000')),
            debug=os.environ.get('FLASK_DEBUG', 'false').lower() == 'true')

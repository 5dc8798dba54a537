"""Fixed sample resume substituted when every extraction strategy fails."""

FALLBACK_TAG = "fallback-sample"

SAMPLE_RESUME = """JOHN DOE
123 Main Street, City, State 12345
(123) 456-7890 | john.doe@email.com | linkedin.com/in/johndoe

SUMMARY
Experienced software engineer with 5+ years of expertise in full-stack development, specializing in React, Node.js, and cloud technologies. Proven track record of delivering scalable applications and optimizing performance.

SKILLS
Programming Languages: JavaScript, TypeScript, Python, Java
Frontend: React, Redux, HTML5, CSS3, SASS, Tailwind CSS
Backend: Node.js, Express, Django, Spring Boot
Databases: MongoDB, PostgreSQL, MySQL, Redis
Cloud & DevOps: AWS, Docker, Kubernetes, CI/CD, GitHub Actions
Testing: Jest, React Testing Library, Cypress

EXPERIENCE

Senior Software Engineer | TechCorp Inc. | Jan 2021 - Present
• Led the development of a customer-facing portal that improved user engagement by 35%
• Architected and implemented microservices architecture, reducing system latency by 40%
• Mentored junior developers and conducted code reviews to ensure code quality
• Collaborated with product managers to define and prioritize feature roadmaps

Software Engineer | WebSolutions LLC | Mar 2018 - Dec 2020
• Developed RESTful APIs and integrated third-party services for e-commerce platform
• Implemented responsive UI components using React and Material UI
• Optimized database queries, resulting in 25% faster page load times
• Participated in agile development process with bi-weekly sprints

Junior Developer | StartupTech | Jun 2016 - Feb 2018
• Built and maintained features for company's main web application
• Assisted in migrating legacy codebase to modern JavaScript frameworks
• Implemented automated testing, increasing code coverage from 45% to 80%

EDUCATION

Bachelor of Science in Computer Science
University of Technology | Graduated: May 2016
• GPA: 3.8/4.0
• Relevant coursework: Data Structures, Algorithms, Database Systems, Web Development

PROJECTS

Personal Finance Dashboard
• Developed a full-stack application for tracking expenses and visualizing spending patterns
• Technologies used: React, Node.js, Express, MongoDB, Chart.js

Open Source Contribution - DevTools Extension
• Created a browser extension to enhance developer productivity
• Implemented features for JSON formatting and local storage inspection

CERTIFICATIONS
• AWS Certified Developer - Associate
• MongoDB Certified Developer
• React Advanced Patterns Workshop"""

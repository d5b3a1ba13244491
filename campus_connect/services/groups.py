import logging

from campus_connect.models.groups import ClassGroup, CourseGroup
from campus_connect.models.roles import Role
from campus_connect.services.access_control import is_program_coordinator
from campus_connect.utils.db import to_object_id
from campus_connect.utils.errors import AuthorizationError, NotFoundError, ValidationError
from campus_connect.utils.validation import positive_int

logger = logging.getLogger(__name__)

ASSIGN_COURSE_FIELDS = ("courseCode", "courseName", "semester", "facultyId", "classGroupId")


class GroupService:

    def __init__(self, db):
        self.db = db

    def assign_course(self, identity, course_code, course_name, semester, faculty_id, class_group_id):
        """
        Create a course group under a class group. Admins may target any class
        group; a faculty caller only one they coordinate.
        """
        if not all([course_code, course_name, semester, faculty_id, class_group_id]):
            raise ValidationError("Please provide all required fields")

        semester = positive_int(semester, "semester")
        faculty = to_object_id(faculty_id)
        if faculty is None:
            raise ValidationError("Invalid facultyId")

        class_group = ClassGroup.find_by_id(self.db, class_group_id)
        if class_group is None:
            raise NotFoundError("Class group not found")

        if identity.role is Role.FACULTY and not is_program_coordinator(identity, class_group):
            raise AuthorizationError("Faculty not allowed to modify class groups they are not coordinating")

        course_group = CourseGroup.for_class_group(
            class_group,
            course_code=str(course_code).strip(),
            course_name=str(course_name).strip(),
            semester=semester,
            faculty=faculty,
        ).save(self.db)

        logger.info("Course %s assigned to class group %s by %s", course_group.course_code, class_group.id, identity.id)
        return course_group

    def my_classes(self, identity):
        """Class and course groups the user belongs to, each tagged with the user's part in it."""
        class_groups = []
        for group in ClassGroup.find_for_member(self.db, identity.id):
            if is_program_coordinator(identity, group):
                user_role = "programCoordinator"
            elif group.tutor == identity.id:
                user_role = "tutor"
            else:
                user_role = "student"
            class_groups.append({**group.to_json(), "userRole": user_role})

        course_groups = []
        for course in CourseGroup.find_for_member(self.db, identity.id):
            user_role = "faculty" if course.faculty == identity.id else "student"
            course_groups.append({**course.to_json(), "studentCount": len(course.students), "userRole": user_role})

        return class_groups, course_groups

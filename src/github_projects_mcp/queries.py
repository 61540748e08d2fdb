"""Fixed GraphQL documents.

Caller-supplied values are only ever bound through variables; nothing here is
formatted or interpolated at runtime.
"""

QUERY_GET_ORGANIZATION_PROJECTS = """
query GetOrganizationProjects($org: String!) {
  organization(login: $org) {
    projectsV2(first: 20) {
      nodes {
        id
        title
        shortDescription
        url
        closed
        createdAt
        updatedAt
      }
    }
  }
}
"""

QUERY_FIND_ORGANIZATION_PROJECT = """
query FindOrganizationProject($org: String!, $projectName: String!) {
  organization(login: $org) {
    projectsV2(first: 10, query: $projectName) {
      nodes {
        id
        title
      }
    }
  }
}
"""

QUERY_GET_PROJECT_DETAILS = """
query GetProjectDetails($id: ID!) {
  node(id: $id) {
    ... on ProjectV2 {
      id
      title
      shortDescription
      url
      closed
      createdAt
      updatedAt
      readme
      items(first: 20) {
        nodes {
          id
          content {
            ... on Issue { title url state }
            ... on PullRequest { title url state }
            ... on DraftIssue { title body }
          }
          fieldValues(first: 8) {
            nodes {
              ... on ProjectV2ItemFieldTextValue {
                text
                field { ... on ProjectV2FieldCommon { name } }
              }
              ... on ProjectV2ItemFieldDateValue {
                date
                field { ... on ProjectV2FieldCommon { name } }
              }
              ... on ProjectV2ItemFieldSingleSelectValue {
                name
                field { ... on ProjectV2FieldCommon { name } }
              }
            }
          }
        }
      }
      fields(first: 20) {
        nodes {
          ... on ProjectV2FieldCommon { id name }
          ... on ProjectV2SingleSelectField {
            id
            name
            options { id name color }
          }
        }
      }
    }
  }
}
"""

QUERY_GET_REPOSITORY_ISSUES = """
query GetRepositoryIssues($owner: String!, $repo: String!, $states: [IssueState!], $first: Int!) {
  repository(owner: $owner, name: $repo) {
    issues(first: $first, states: $states, orderBy: {field: CREATED_AT, direction: DESC}) {
      nodes {
        id
        number
        title
        state
        createdAt
        updatedAt
        url
        author { login }
        labels(first: 10) { nodes { name color } }
        assignees(first: 5) { nodes { login avatarUrl } }
        projectsV2(first: 10) { nodes { id title } }
      }
    }
  }
}
"""

QUERY_GET_REPOSITORY_PULL_REQUESTS = """
query GetRepositoryPullRequests($owner: String!, $repo: String!, $states: [PullRequestState!], $first: Int!) {
  repository(owner: $owner, name: $repo) {
    pullRequests(first: $first, states: $states, orderBy: {field: CREATED_AT, direction: DESC}) {
      nodes {
        id
        number
        title
        state
        createdAt
        updatedAt
        url
        author { login }
        labels(first: 10) { nodes { name color } }
        assignees(first: 5) { nodes { login avatarUrl } }
        reviews(first: 10) { nodes { author { login } state } }
        projectsV2(first: 10) { nodes { id title } }
      }
    }
  }
}
"""

MUTATION_ADD_PROJECT_ITEM_BY_ID = """
mutation AddProjectItem($input: AddProjectV2ItemByIdInput!) {
  addProjectV2ItemById(input: $input) {
    item { id }
  }
}
"""

MUTATION_ADD_PROJECT_DRAFT_ISSUE = """
mutation AddDraftIssue($input: AddProjectV2DraftIssueInput!) {
  addProjectV2DraftIssue(input: $input) {
    projectItem { id }
  }
}
"""

MUTATION_UPDATE_PROJECT_ITEM_FIELD = """
mutation UpdateProjectItemField($input: UpdateProjectV2ItemFieldValueInput!) {
  updateProjectV2ItemFieldValue(input: $input) {
    projectV2Item { id }
  }
}
"""

_REPOSITORY_NODE_FIELDS = """
        nodes {
          id
          name
          description
          url
          stargazerCount
          forkCount
          isPrivate
          updatedAt
        }
"""

QUERY_GET_ORGANIZATION_REPOSITORIES = (
    """
query GetOrgRepos($owner: String!, $first: Int!) {
  organization(login: $owner) {
    repositories(first: $first, orderBy: {field: UPDATED_AT, direction: DESC}) {"""
    + _REPOSITORY_NODE_FIELDS
    + """    }
  }
}
"""
)

QUERY_GET_USER_REPOSITORIES = (
    """
query GetUserRepos($owner: String!, $first: Int!) {
  user(login: $owner) {
    repositories(first: $first, orderBy: {field: UPDATED_AT, direction: DESC}) {"""
    + _REPOSITORY_NODE_FIELDS
    + """    }
  }
}
"""
)

QUERY_GET_PROJECT_VIEWS = """
query GetProjectViews($id: ID!) {
  node(id: $id) {
    ... on ProjectV2 {
      views(first: 10) {
        nodes {
          id
          name
          layout
          fields(first: 20) {
            nodes {
              ... on ProjectV2FieldCommon { id name }
            }
          }
        }
      }
    }
  }
}
"""
